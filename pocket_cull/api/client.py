#!/usr/bin/env python3
"""
Pocket API client.
Posts JSON to the v3 endpoints and decodes the answers into typed objects.
"""

import logging

import requests

from ..config import DEFAULT_ORIGIN
from ..exceptions import ConfigError, RemoteAPIError, TransportError
from .models import VALID_SORTS, VALID_STATES, Action, Item, ModifyResult

logger = logging.getLogger(__name__)

# Pocket API endpoints, relative to the origin
RETRIEVE_PATH = "/v3/get"
ADD_PATH = "/v3/add"
SEND_PATH = "/v3/send"

JSON_HEADERS = {
    'X-Accept': 'application/json',
    'Content-Type': 'application/json',
}

ERROR_HEADERS = ('X-Error', 'X-Error-Code')
RATE_LIMIT_HEADERS = (
    'X-Limit-User-Limit',
    'X-Limit-User-Remaining',
    'X-Limit-User-Reset',
    'X-Limit-Key-Limit',
    'X-Limit-Key-Remaining',
    'X-Limit-Key-Reset',
)


def _error_from_response(response):
    headers = response.headers
    rate_limits = {name: headers.get(name, "") for name in RATE_LIMIT_HEADERS}
    details = "; ".join(
        f"{name}={headers.get(name, '')!r}" for name in ERROR_HEADERS + RATE_LIMIT_HEADERS
    )
    hint = None
    if response.status_code == 401:
        hint = "The access token may be revoked. Run 'pocket clear-auth' and try again."
    elif response.status_code == 403 and rate_limits['X-Limit-User-Remaining'] == "0":
        hint = "Rate limit exhausted. Wait until the reset time shown above."
    return RemoteAPIError(
        f"got response {response.status_code}; {details}",
        status_code=response.status_code,
        error_code=headers.get('X-Error-Code'),
        rate_limits=rate_limits,
        hint=hint,
    )


def post_json(url, data, session=None):
    """POST data as JSON to url and return the decoded JSON answer."""
    session = session or requests
    try:
        response = session.post(url, json=data, headers=JSON_HEADERS)
    except requests.RequestException as e:
        raise TransportError(f"Network error calling {url}: {e}") from e

    if response.status_code != 200:
        raise _error_from_response(response)

    try:
        return response.json()
    except ValueError as e:
        raise RemoteAPIError(
            f"Invalid JSON from {url}: {e}", status_code=response.status_code
        ) from e


class PocketClient:
    def __init__(self, credential, origin=DEFAULT_ORIGIN, session=None):
        """Initialize Pocket API client for an authorized credential."""
        if not credential.consumer_key or not credential.access_token:
            raise ConfigError("Both a consumer key and an access token are required.")
        self.credential = credential
        self.origin = origin.rstrip('/')
        self.session = session or requests.Session()

    def post(self, action, data):
        """Post to an API action, adding the credential to the payload."""
        payload = dict(data)
        payload.update(self.credential.auth_fields())
        return post_json(self.origin + action, payload, self.session)

    def retrieve(self, options=None):
        """
        Retrieve items matching the given options.

        Returns:
            List of Item, in whatever order the API listed them.
        """
        data = options.to_api() if options else {}
        if data.get('sort') and data['sort'] not in VALID_SORTS:
            raise ConfigError(f"Invalid sort '{data['sort']}'. Must be one of: {', '.join(VALID_SORTS)}")
        if data.get('state') and data['state'] not in VALID_STATES:
            raise ConfigError(f"Invalid state '{data['state']}'. Must be one of: {', '.join(VALID_STATES)}")

        result = self.post(RETRIEVE_PATH, data)
        # An empty list comes back as [] instead of {}
        entries = result.get('list') or {}
        if isinstance(entries, dict):
            entries = entries.values()
        items = [Item.from_api(entry) for entry in entries]
        logger.debug("Retrieved %d items", len(items))
        return items

    def add(self, options):
        """Save a new URL."""
        result = self.post(ADD_PATH, options.to_api())
        return Item.from_api(result.get('item') or {})

    def modify(self, *actions):
        """Send a bulk modify request. Returns a ModifyResult."""
        data = {'actions': [action.to_api() for action in actions]}
        result = ModifyResult.from_api(self.post(SEND_PATH, data))
        for action, ok in zip(actions, result.action_results):
            if not ok:
                logger.warning("Action %r on item %d failed", action.action, action.item_id)
        return result

    def archive(self, item_id):
        return self.modify(Action.archive(item_id))

    def delete(self, item_id):
        return self.modify(Action.delete(item_id))
