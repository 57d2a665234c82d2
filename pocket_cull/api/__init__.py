"""
Pocket API integration.

This module provides direct integration with the Pocket API:
- OAuth authentication flow with a local redirect listener
- Item retrieval, add and bulk modify
"""

from .auth import PocketAuth
from .callback import CallbackServer
from .client import PocketClient, post_json
from .models import Action, AddOptions, Credential, Item, ModifyResult, RetrieveOptions

__all__ = [
    'Action',
    'AddOptions',
    'CallbackServer',
    'Credential',
    'Item',
    'ModifyResult',
    'PocketAuth',
    'PocketClient',
    'RetrieveOptions',
    'post_json',
]
