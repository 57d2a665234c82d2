#!/usr/bin/env python3
"""
Credential persistence for Pocket Cull.
Keeps the consumer key and the OAuth access token under the config directory.
"""

import json
import logging
import os

from ..api.auth import PocketAuth
from ..api.models import Credential
from ..exceptions import ConfigError, PersistenceError

logger = logging.getLogger(__name__)

CONSUMER_KEY_PROMPT = "Enter your consumer key (from here https://getpocket.com/developer/apps/): "


class CredentialStore:
    """Loads and saves the consumer key and access token."""

    def __init__(self, config, prompt=input, authorizer_factory=None):
        self.config = config
        self.prompt = prompt
        self.authorizer_factory = authorizer_factory or (
            lambda consumer_key: PocketAuth(consumer_key, config=self.config)
        )

    def _ensure_dir(self):
        try:
            self.config.config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"Cannot create config directory {self.config.config_dir}: {e}") from e

    def load_consumer_key(self):
        """Return the consumer key, asking for it on first run."""
        env_key = os.getenv('POCKET_CONSUMER_KEY', '').strip()
        if env_key:
            return env_key

        path = self.config.consumer_key_file
        try:
            with open(path, 'r', encoding='utf-8') as f:
                first_line = f.readline().strip()
            if first_line:
                return first_line
            logger.info("Consumer key file %s is empty", path)
        except FileNotFoundError:
            logger.info("No consumer key saved at %s", path)
        except OSError as e:
            raise PersistenceError(f"Can't read consumer key from {path}: {e}") from e

        consumer_key = self.prompt(CONSUMER_KEY_PROMPT).strip()
        if not consumer_key:
            raise ConfigError("A consumer key is required.")

        self._ensure_dir()
        try:
            with open(path, 'w', encoding='utf-8') as f:
                f.write(consumer_key + "\n")
            os.chmod(path, 0o600)
        except OSError as e:
            raise PersistenceError(f"Can't save consumer key to {path}: {e}") from e
        return consumer_key

    def load_tokens(self, consumer_key):
        """Saved Credential for consumer_key, or None when absent or unusable."""
        path = self.config.auth_file
        if not path.exists():
            return None

        try:
            with open(path, 'r', encoding='utf-8') as f:
                saved = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Failed to load saved tokens from %s: %s", path, e)
            return None

        if not isinstance(saved, dict) or not saved.get('access_token'):
            logger.warning("Saved tokens in %s have no access token", path)
            return None
        if saved.get('consumer_key') and saved['consumer_key'] != consumer_key:
            logger.info("Saved tokens belong to another consumer key")
            return None
        return Credential(
            consumer_key=consumer_key,
            access_token=saved['access_token'],
            username=saved.get('username') or "",
        )

    def save_tokens(self, credential):
        """Save a Credential to the auth file."""
        self._ensure_dir()
        data = {
            'consumer_key': credential.consumer_key,
            'access_token': credential.access_token,
            'username': credential.username,
        }
        path = self.config.auth_file
        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
            os.chmod(path, 0o600)
        except OSError as e:
            raise PersistenceError(f"Failed to save tokens to {path}: {e}") from e
        logger.info("Tokens saved to %s", path)

    def ensure_access_token(self, consumer_key):
        """Return a usable Credential, running the OAuth flow when none is saved."""
        credential = self.load_tokens(consumer_key)
        if credential:
            logger.debug("Using saved access token")
            return credential

        credential = self.authorizer_factory(consumer_key).authorize()
        try:
            self.save_tokens(credential)
        except PersistenceError as e:
            # Still usable for this run; the next run authorizes again.
            logger.warning("%s", e)
        return credential

    def clear(self):
        """Remove the saved access token. Returns True when a file was removed."""
        path = self.config.auth_file
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise PersistenceError(f"Failed to clear tokens at {path}: {e}") from e
        return True
