#!/usr/bin/env python3
"""
Pocket Cull - command-line client for Pocket <getpocket.com>.
List, add, archive and delete saved items, and cull dead or duplicate ones.
"""

import logging
import os
import sys

from .. import __version__
from ..api.client import PocketClient
from ..api.models import AddOptions, RetrieveOptions
from ..config import Config
from ..core.cull import CullPipeline, CullPolicy
from ..core.formatter import ItemFormatter
from ..core.link_checker import LinkChecker
from ..exceptions import ConfigError, PocketError, RemoteAPIError, UserAbort
from ..utils.console_utils import ConsolePrompter, init_console
from ..utils.credentials import CredentialStore

logger = logging.getLogger(__name__)

# Exit codes
SUCCESS = 0
GENERAL_ERROR = 1
UNEXPECTED_ERROR = 2
INTERRUPTED = 130

HELP = """
Pocket Cull - A Pocket <getpocket.com> client.

Usage:
  pocket list [--format=<template>] [--domain=<domain>] [--tag=<tag>]
              [--search=<query>] [--sort=<sort>] [--cull|--delete]
  pocket archive <item-id>
  pocket delete <item-id>
  pocket add <url> [--title=<title>] [--tags=<tags>]
  pocket clear-auth
  pocket help | --version

Options for list:
  -f, --format <template>  Python format template to show items, e.g. "{item_id} {url}"
  -d, --domain <domain>    Filter items by its domain when listing.
  -s, --search <query>     Search query when listing.
  -t, --tag <tag>          Filter items by a tag when listing.
  -o, --sort <sort>        Sort items by "newest", "oldest", "title", or "site"
  --cull                   Check items one by one and prompt to open and delete each one
  --delete                 Delete all items retrieved

Options for add:
  --title <title>          A manually specified title for the article
  --tags <tags>            A comma-separated list of tags

Global options:
  -v, --verbose            Show diagnostic logging

Listing always deletes items whose URL duplicates an earlier one.

Environment:
  POCKET_CONSUMER_KEY, POCKET_CONFIG_DIR, POCKET_AUTH_TIMEOUT,
  POCKET_PROBE_TIMEOUT, POCKET_NO_BROWSER, POCKET_LOG_LEVEL
"""

VALUE_OPTIONS = {
    '--format': 'format', '-f': 'format',
    '--domain': 'domain', '-d': 'domain',
    '--search': 'search', '-s': 'search',
    '--tag': 'tag', '-t': 'tag',
    '--sort': 'sort', '-o': 'sort',
    '--title': 'title',
    '--tags': 'tags',
}
FLAG_OPTIONS = {
    '--cull': 'cull',
    '--delete': 'delete',
    '--verbose': 'verbose', '-v': 'verbose',
    '--version': 'version',
    '--help': 'help', '-h': 'help',
}


def parse_args(argv):
    """Split argv into (positional args, options dict)."""
    positional, options = [], {}
    args = list(argv)
    while args:
        arg = args.pop(0)
        name, has_value, value = arg.partition('=')
        if name in VALUE_OPTIONS:
            if not has_value:
                if not args:
                    raise ConfigError(f"Missing value for {name}")
                value = args.pop(0)
            options[VALUE_OPTIONS[name]] = value
        elif arg in FLAG_OPTIONS:
            options[FLAG_OPTIONS[arg]] = True
        elif arg.startswith('-') and arg != '-':
            raise ConfigError(f"Unknown option: {arg}")
        else:
            positional.append(arg)
    return positional, options


def setup_logging(verbose=False):
    level = logging.DEBUG if verbose else os.getenv('POCKET_LOG_LEVEL', 'WARNING').upper()
    try:
        logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stderr)
    except ValueError as e:
        raise ConfigError(f"Invalid POCKET_LOG_LEVEL: {e}")


def _item_id(positional, command):
    if len(positional) < 2:
        raise ConfigError(f"Wrong arguments, need <item-id>. Usage: pocket {command} <item-id>")
    try:
        item_id = int(positional[1])
    except ValueError:
        raise ConfigError(f"Invalid item id: {positional[1]!r}")
    if item_id <= 0:
        raise ConfigError(f"Invalid item id: {item_id}")
    return item_id


class PocketCLI:
    def __init__(self, config=None, store=None, client_factory=None, prompter=None, out=None):
        self.config = config or Config.from_env()
        self.store = store or CredentialStore(self.config)
        self.client_factory = client_factory or (
            lambda credential: PocketClient(credential, origin=self.config.origin)
        )
        self.prompter = prompter or ConsolePrompter()
        self.out = out
        self._client = None

    def _print(self, *args):
        print(*args, file=self.out or sys.stdout)

    @property
    def client(self):
        """Authorized client, running first-time setup when needed."""
        if self._client is None:
            consumer_key = self.store.load_consumer_key()
            credential = self.store.ensure_access_token(consumer_key)
            self._client = self.client_factory(credential)
        return self._client

    def list_items(self, options):
        if options.get('cull') and options.get('delete'):
            raise ConfigError("--cull and --delete cannot be used together")
        # A bad template is fatal before anything is fetched or deleted
        formatter = ItemFormatter(options.get('format'))

        retrieve = RetrieveOptions(
            domain=options.get('domain'),
            search=options.get('search'),
            tag=options.get('tag'),
            sort=options.get('sort'),
        )
        items = self.client.retrieve(retrieve)

        pipeline = CullPipeline(
            self.client,
            formatter=formatter,
            prompter=self.prompter,
            checker=LinkChecker(timeout=self.config.probe_timeout),
            out=self.out,
        )
        policy = CullPolicy(auto_delete_all=bool(options.get('delete')), probe=bool(options.get('cull')))
        report = pipeline.cull(items, policy)
        if report.deleted or report.failures:
            self._print(report.summary())
        return report

    def archive(self, item_id):
        result = self.client.archive(item_id)
        if not result.ok:
            raise RemoteAPIError(f"Archive of item {item_id} was rejected")
        self._print(f"Archived item {item_id}")

    def delete(self, item_id):
        result = self.client.delete(item_id)
        if not result.ok:
            raise RemoteAPIError(f"Delete of item {item_id} was rejected")
        self._print(f"Deleted item {item_id}")

    def add(self, url, title=None, tags=None):
        item = self.client.add(AddOptions(url=url, title=title, tags=tags))
        if item.item_id:
            self._print(f"Added item {item.item_id} <{item.url or url}>")
        else:
            self._print(f"Added <{url}>")

    def clear_auth(self):
        if self.store.clear():
            self._print("Saved tokens cleared")
        else:
            self._print("No saved tokens found")

    def show_help(self):
        self._print(HELP)

    def run(self, positional, options):
        """Dispatch one command."""
        if options.get('version'):
            self._print(f"pocket {__version__}")
            return SUCCESS
        if not positional or options.get('help') or positional[0] == 'help':
            self.show_help()
            return SUCCESS

        command = positional[0]
        if command == 'list':
            self.list_items(options)
        elif command == 'archive':
            self.archive(_item_id(positional, command))
        elif command == 'delete':
            self.delete(_item_id(positional, command))
        elif command == 'add':
            if len(positional) < 2 or not positional[1]:
                raise ConfigError("Wrong arguments, need <url>. Usage: pocket add <url>")
            self.add(positional[1], options.get('title'), options.get('tags'))
        elif command == 'clear-auth':
            self.clear_auth()
        else:
            raise ConfigError(f"Unknown command: {command}", hint="Run 'pocket help' for usage.")
        return SUCCESS


def main(argv=None, cli=None):
    """Entry point. Returns a process exit code."""
    argv = sys.argv[1:] if argv is None else argv
    init_console()

    try:
        positional, options = parse_args(argv)
        setup_logging(options.get('verbose', False))
        cli = cli or PocketCLI()
        return cli.run(positional, options)
    except UserAbort as e:
        print(e, file=sys.stderr)
        return INTERRUPTED
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return INTERRUPTED
    except PocketError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        if e.hint:
            print(e.hint, file=sys.stderr)
        return GENERAL_ERROR
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        print(f"ERROR: Unexpected error: {e}", file=sys.stderr)
        return UNEXPECTED_ERROR


if __name__ == "__main__":
    sys.exit(main())
