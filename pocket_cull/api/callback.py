#!/usr/bin/env python3
"""
Loopback HTTP listener used as the OAuth redirect target.

Pocket redirects the browser here once the user approves access. The first
request other than a favicon probe sets a one-shot event that the waiting
authorization flow blocks on.
"""

import http.server
import logging
import threading

from ..exceptions import AuthError

logger = logging.getLogger(__name__)

CONFIRMATION_BODY = "Authorized.\n"


class CallbackHandler(http.server.BaseHTTPRequestHandler):
    """Answers the browser redirect and signals completion."""

    def log_message(self, format, *args):
        logger.debug("callback: " + format, *args)

    def _answer(self, send_body=True):
        if self.path.split('?', 1)[0] == '/favicon.ico':
            self.send_error(404, "Not Found")
            return

        body = CONFIRMATION_BODY.encode('utf-8')
        self.send_response(200)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if send_body:
            self.wfile.write(body)
        self.server.approved.set()

    def do_GET(self):
        self._answer()

    def do_HEAD(self):
        self._answer(send_body=False)

    def do_POST(self):
        # Drain the form body so the connection closes cleanly
        length = int(self.headers.get('Content-Length') or 0)
        if length:
            self.rfile.read(length)
        self._answer()


class CallbackServer:
    """Short-lived HTTP server on an ephemeral 127.0.0.1 port."""

    def __init__(self, host='127.0.0.1', port=0):
        try:
            self.httpd = http.server.ThreadingHTTPServer((host, port), CallbackHandler)
        except OSError as e:
            raise AuthError(f"Cannot start the local callback listener on {host}: {e}") from e
        self.httpd.daemon_threads = True
        self.httpd.approved = threading.Event()
        self._thread = threading.Thread(
            target=self.httpd.serve_forever, kwargs={'poll_interval': 0.1}, daemon=True
        )
        self._started = False

    @property
    def url(self):
        host, port = self.httpd.server_address[:2]
        return f"http://{host}:{port}"

    @property
    def approved(self):
        return self.httpd.approved.is_set()

    def start(self):
        self._thread.start()
        self._started = True
        logger.debug("Callback listener running at %s", self.url)
        return self

    def wait(self, timeout=None):
        """Block until the redirect arrives. Raises AuthError on timeout."""
        if not self.httpd.approved.wait(timeout):
            raise AuthError(
                f"Timed out after {timeout:g}s waiting for authorization in the browser.",
                hint="Open the printed URL and approve access, or raise POCKET_AUTH_TIMEOUT.",
            )

    def close(self):
        if self._started:
            self.httpd.shutdown()
            self._thread.join()
            self._started = False
        self.httpd.server_close()

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.close()
