#!/usr/bin/env python3
"""
Pocket API OAuth authentication module.
Handles the 3-step OAuth flow for Pocket API access, using a local
HTTP listener as the redirect target.
"""

import logging
import webbrowser
from urllib.parse import urlencode

from ..config import Config
from ..exceptions import AuthError, PocketError
from .callback import CallbackServer
from .client import post_json
from .models import Credential

logger = logging.getLogger(__name__)

# Pocket API endpoints, relative to the origin
REQUEST_TOKEN_PATH = "/v3/oauth/request"
AUTHORIZE_PATH = "/auth/authorize"
ACCESS_TOKEN_PATH = "/v3/oauth/authorize"


class PocketAuth:
    def __init__(self, consumer_key, config=None, session=None, opener=webbrowser.open):
        """Initialize Pocket authentication."""
        if not consumer_key:
            raise AuthError("Consumer key is required to authorize.")
        self.consumer_key = consumer_key
        self.config = config or Config()
        self.session = session
        self.opener = opener

    def _url(self, path):
        return self.config.origin + path

    def obtain_request_token(self, redirect_uri):
        """Get a request token from Pocket."""
        data = {
            "consumer_key": self.consumer_key,
            "redirect_uri": redirect_uri,
        }
        try:
            result = post_json(self._url(REQUEST_TOKEN_PATH), data, self.session)
        except PocketError as e:
            raise AuthError(f"Failed to get request token: {e}", hint=e.hint) from e

        code = result.get('code')
        if not code:
            raise AuthError(f"Failed to get request token: no code in response {result!r}")
        return code

    def authorization_url(self, request_token, redirect_uri):
        """URL the user opens to approve access."""
        query = urlencode({'request_token': request_token, 'redirect_uri': redirect_uri})
        return f"{self._url(AUTHORIZE_PATH)}?{query}"

    def obtain_access_token(self, request_token, redirect_uri):
        """Exchange request token for access token."""
        data = {
            "consumer_key": self.consumer_key,
            "code": request_token,
            "redirect_uri": redirect_uri,
        }
        try:
            result = post_json(self._url(ACCESS_TOKEN_PATH), data, self.session)
        except PocketError as e:
            if getattr(e, 'status_code', None) == 403:
                raise AuthError(
                    "Authorization denied. Please make sure you clicked 'Authorize' in the browser.",
                    hint=e.hint,
                ) from e
            raise AuthError(f"Failed to get access token: {e}", hint=e.hint) from e

        access_token = result.get('access_token')
        if not access_token:
            raise AuthError(f"Failed to get access token: no access_token in response {result!r}")
        return Credential(
            consumer_key=self.consumer_key,
            access_token=access_token,
            username=result.get('username') or "",
        )

    def authorize(self):
        """Complete authentication flow and return a Credential."""
        print("Starting Pocket API authentication...")
        print("=" * 50)

        with CallbackServer() as callback:
            redirect_uri = callback.url

            print("Step 1: Getting request token...")
            request_token = self.obtain_request_token(redirect_uri)
            print("✓ Request token obtained")

            print("\nStep 2: User authorization...")
            auth_url = self.authorization_url(request_token, redirect_uri)
            print("Open this URL in your browser and click 'Authorize':")
            print(auth_url)
            if self.config.open_browser:
                try:
                    self.opener(auth_url)
                except webbrowser.Error as e:
                    logger.warning("Failed to open browser automatically: %s", e)
            callback.wait(self.config.auth_timeout)
            print("✓ Authorization received")

            print("\nStep 3: Getting access token...")
            credential = self.obtain_access_token(request_token, redirect_uri)
            print("✓ Access token obtained")

        print("\n✓ Authentication completed successfully!")
        return credential
