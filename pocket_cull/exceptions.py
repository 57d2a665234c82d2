#!/usr/bin/env python3
"""
Exception hierarchy for Pocket Cull.

Every error that crosses a module boundary is a PocketError subclass so
the CLI can print a clean message and pick an exit code. Raw requests
exceptions are caught in the api/core modules and re-raised as one of
these.
"""


class PocketError(Exception):
    """Base exception for all Pocket Cull errors."""

    def __init__(self, message, hint=None):
        super().__init__(message)
        self.hint = hint


class TransportError(PocketError):
    """Network failure reaching the Pocket API or a probed URL."""


class RemoteAPIError(PocketError):
    """Non-success answer from the Pocket API."""

    def __init__(self, message, status_code=None, error_code=None, rate_limits=None, hint=None):
        super().__init__(message, hint=hint)
        self.status_code = status_code
        self.error_code = error_code
        self.rate_limits = rate_limits or {}


class AuthError(PocketError):
    """A step of the OAuth handshake failed or timed out."""


class PersistenceError(PocketError):
    """Reading or writing a local credential file failed."""


class ConfigError(PocketError):
    """Bad output template, option value or missing argument."""


class UserAbort(PocketError):
    """The user asked to quit at a prompt."""
