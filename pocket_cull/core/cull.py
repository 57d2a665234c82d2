#!/usr/bin/env python3
"""
Interactive culling of saved Pocket items.

Items are walked in Pocket's sort order. Items whose canonical URL was
already seen are deleted without asking. With probing on, every other
item is checked for liveness, offered for opening in the browser and
then offered for deletion.
"""

import logging
import sys
import webbrowser
from dataclasses import dataclass, field
from typing import List, Tuple

from ..api.models import Action
from ..exceptions import RemoteAPIError, TransportError
from ..utils.console_utils import ConsolePrompter
from .canonical import canonicalize
from .formatter import ItemFormatter
from .link_checker import LinkChecker

logger = logging.getLogger(__name__)


@dataclass
class CullPolicy:
    auto_delete_all: bool = False
    probe: bool = False


@dataclass
class CullReport:
    kept: List[int] = field(default_factory=list)
    deleted: List[int] = field(default_factory=list)
    duplicates: List[int] = field(default_factory=list)
    failures: List[Tuple[int, str]] = field(default_factory=list)

    def summary(self):
        return (
            f"{len(self.kept)} kept, {len(self.deleted)} deleted "
            f"({len(self.duplicates)} duplicates), {len(self.failures)} errors"
        )


class CullPipeline:
    def __init__(self, client, formatter=None, prompter=None, checker=None,
                 opener=webbrowser.open_new_tab, out=None):
        self.client = client
        self.formatter = formatter or ItemFormatter()
        self.prompter = prompter or ConsolePrompter()
        self.checker = checker or LinkChecker()
        self.opener = opener
        self.out = out

    def _print(self, *args, **kwargs):
        print(*args, file=self.out or sys.stdout, **kwargs)

    def cull(self, items, policy=None):
        """Process items under policy and return a CullReport."""
        policy = policy or CullPolicy()
        items = sorted(items, key=lambda item: item.sort_id)
        report = CullReport()

        if policy.auto_delete_all:
            self._delete_all(items, report)
            return report

        seen = set()
        total = len(items)
        for i, item in enumerate(items, 1):
            self._print(f"{i}/{total} {self.formatter.render(item)}")

            key = canonicalize(item.url)
            if key in seen:
                self._print("Item already seen. Deleting...")
                if self._delete(item, report):
                    report.duplicates.append(item.item_id)
                self._print()
                continue
            seen.add(key)

            if policy.probe:
                self._review(item, report)
            else:
                report.kept.append(item.item_id)
            self._print()

        return report

    def _delete_all(self, items, report):
        if not items:
            self._print("No items to delete.")
            return
        if not self.prompter.confirm(f"Really delete {len(items)} items?"):
            report.kept.extend(item.item_id for item in items)
            return

        actions = [Action.delete(item.item_id) for item in items]
        try:
            result = self.client.modify(*actions)
        except (TransportError, RemoteAPIError) as e:
            self._print(f"✗ Bulk delete failed: {e}")
            report.failures.extend((item.item_id, str(e)) for item in items)
            return

        results = list(result.action_results)
        for index, item in enumerate(items):
            if index >= len(results):
                report.failures.append((item.item_id, "no result returned"))
            elif results[index]:
                report.deleted.append(item.item_id)
            else:
                report.failures.append((item.item_id, "delete rejected"))
        self._print(f"✓ Deleted {len(report.deleted)} of {len(items)} items")

    def _delete(self, item, report):
        try:
            result = self.client.modify(Action.delete(item.item_id))
        except (TransportError, RemoteAPIError) as e:
            self._print(f"✗ Delete of item {item.item_id} failed: {e}")
            report.failures.append((item.item_id, str(e)))
            return False

        if not result.ok:
            self._print(f"✗ Delete of item {item.item_id} was rejected")
            report.failures.append((item.item_id, "delete rejected"))
            return False
        report.deleted.append(item.item_id)
        return True

    def _review(self, item, report):
        try:
            result = self.checker.probe(item.url)
        except TransportError as e:
            self._print(f"✗ {e}")
            report.failures.append((item.item_id, str(e)))
            result = None

        if result is not None and result.alive:
            self._print(f"  {result}")
            prompt = f"Open {result.final_url}?" if result.redirected else "Open?"
            if self.prompter.confirm(prompt) and not self.opener(result.final_url):
                logger.warning("Could not open a browser for %s", result.final_url)
        elif result is not None and not result.inconclusive:
            self._print(f"  Status was {result}")

        if self.prompter.confirm("Delete?"):
            self._delete(item, report)
        else:
            report.kept.append(item.item_id)
