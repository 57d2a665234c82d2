#!/usr/bin/env python3
"""
Link checker for saved Pocket items.
Tells whether a saved URL still answers, following redirects.
"""

import http.client
import logging
from dataclasses import dataclass

import requests
from bs4 import BeautifulSoup

from ..config import DEFAULT_PROBE_TIMEOUT
from ..exceptions import TransportError

logger = logging.getLogger(__name__)

USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36'

# Phrases sites show on a 200 page for content that is gone
REMOVED_PHRASES = (
    "isn't available anymore",
    "this page doesn",
)

NOT_FOUND_STATUS = 404
NOT_FOUND_TEXT = "Not Available"
# Highest status still counted as alive (308 Permanent Redirect)
ALIVE_MAX_STATUS = 308


@dataclass
class ProbeResult:
    status: int
    status_text: str
    final_url: str
    requested_url: str = ""

    @property
    def alive(self):
        return 0 < self.status <= ALIVE_MAX_STATUS

    @property
    def inconclusive(self):
        return self.status == 0

    @property
    def redirected(self):
        return bool(self.final_url) and self.final_url != self.requested_url

    def __str__(self):
        if self.inconclusive:
            return self.status_text
        return f"{self.status} {self.status_text}".strip()


def _closed_without_response(error):
    """True when the server dropped the connection before answering (EOF)."""
    # requests wraps urllib3 errors, which wrap http.client errors in args
    pending, seen = [error], set()
    while pending:
        current = pending.pop()
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(current, (http.client.RemoteDisconnected, http.client.IncompleteRead, EOFError)):
            return True
        pending.append(current.__cause__)
        pending.extend(arg for arg in current.args if isinstance(arg, BaseException))
    return False


def _may_be_html(response):
    content_type = response.headers.get('Content-Type', '').lower()
    return not content_type or 'html' in content_type


def page_removed(body, content_type=""):
    """True when the page text contains one of REMOVED_PHRASES."""
    if not body:
        return False
    text = body
    if 'html' in content_type.lower() or body.lstrip().startswith('<'):
        text = BeautifulSoup(body, 'html.parser').get_text()
    # Typographic apostrophes are common in page copy
    text = " ".join(text.replace('’', "'").lower().split())
    return any(phrase in text for phrase in REMOVED_PHRASES)


class LinkChecker:
    def __init__(self, session=None, timeout=DEFAULT_PROBE_TIMEOUT):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.headers = {'User-Agent': USER_AGENT}

    def _request(self, method, url):
        return self.session.request(
            method, url, timeout=self.timeout, headers=self.headers, allow_redirects=True
        )

    def _check_body(self, url, head_result):
        """GET a page HEAD called alive and downgrade it when the body says it is gone."""
        try:
            response = self._request('GET', url)
        except requests.RequestException as e:
            logger.info("GET %s after a good HEAD failed: %s", url, e)
            return head_result
        if page_removed(response.text, response.headers.get('Content-Type', '')):
            return ProbeResult(NOT_FOUND_STATUS, NOT_FOUND_TEXT, response.url or head_result.final_url, url)
        return head_result

    def probe(self, url):
        """
        Check whether url still answers.

        HEAD first; GET when HEAD fails or answers with an error status.
        A 2xx HEAD for an HTML (or untyped) page is followed by a GET so the
        body can be checked for "page removed" text.
        Raises TransportError when the GET fails too, unless the server
        simply closed the connection, which gives an inconclusive result.
        """
        try:
            response = self._request('HEAD', url)
            if response.status_code < 400:
                result = ProbeResult(response.status_code, response.reason or "", response.url or url, url)
                if response.status_code < 300 and _may_be_html(response):
                    return self._check_body(url, result)
                return result
            logger.info("HEAD %s answered %d, trying GET", url, response.status_code)
        except requests.RequestException as e:
            logger.info("Got an error when HEADing %s: %s, GETting instead", url, e)

        try:
            response = self._request('GET', url)
        except requests.RequestException as e:
            if _closed_without_response(e):
                logger.info("Connection closed by %s without a response", url)
                return ProbeResult(0, "No response (connection closed)", url, url)
            raise TransportError(f"Could not reach {url}: {e}") from e

        status, status_text = response.status_code, response.reason or ""
        if page_removed(response.text, response.headers.get('Content-Type', '')):
            status, status_text = NOT_FOUND_STATUS, NOT_FOUND_TEXT
        return ProbeResult(status, status_text, response.url or url, url)
