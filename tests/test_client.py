"""Tests for the Pocket API gateway (api/client.py).

The HTTP session is mocked; these tests check request shape, error
mapping and response decoding.
"""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest
import requests

from conftest import fake_response
from pocket_cull.api.client import JSON_HEADERS, PocketClient, post_json
from pocket_cull.api.models import Action, AddOptions, Credential, RetrieveOptions
from pocket_cull.exceptions import ConfigError, RemoteAPIError, TransportError

CREDENTIAL = Credential(consumer_key="1234-abcd", access_token="5678-defg")

RATE_LIMIT_HEADERS = {
    "X-Limit-User-Limit": "320",
    "X-Limit-User-Remaining": "0",
    "X-Limit-User-Reset": "3600",
    "X-Limit-Key-Limit": "10000",
    "X-Limit-Key-Remaining": "9999",
    "X-Limit-Key-Reset": "86400",
}


def _client(session: MagicMock) -> PocketClient:
    return PocketClient(CREDENTIAL, origin="https://pocket.test", session=session)


# ---------------------------------------------------------------------------
# post_json
# ---------------------------------------------------------------------------

class TestPostJSON:
    def test_sends_json_headers(self, session: MagicMock) -> None:
        session.post.return_value = fake_response(json_data={"status": 1})
        assert post_json("https://pocket.test/v3/get", {"a": 1}, session) == {"status": 1}
        session.post.assert_called_once_with(
            "https://pocket.test/v3/get", json={"a": 1}, headers=JSON_HEADERS
        )
        assert JSON_HEADERS["X-Accept"] == "application/json"
        assert JSON_HEADERS["Content-Type"] == "application/json"

    def test_error_header_in_message(self, session: MagicMock) -> None:
        session.post.return_value = fake_response(
            403,
            headers={"X-Error": "user not authorized", "X-Error-Code": "158", **RATE_LIMIT_HEADERS},
        )
        with pytest.raises(RemoteAPIError) as exc_info:
            post_json("https://pocket.test/v3/get", {}, session)

        error = exc_info.value
        assert "user not authorized" in str(error)
        assert "403" in str(error)
        assert error.status_code == 403
        assert error.error_code == "158"

    def test_rate_limits_surfaced(self, session: MagicMock) -> None:
        session.post.return_value = fake_response(403, headers=RATE_LIMIT_HEADERS)
        with pytest.raises(RemoteAPIError) as exc_info:
            post_json("https://pocket.test/v3/get", {}, session)

        error = exc_info.value
        assert error.rate_limits == RATE_LIMIT_HEADERS
        for value in RATE_LIMIT_HEADERS.values():
            assert repr(value) in str(error)
        assert error.hint and "Rate limit" in error.hint

    def test_network_error_is_transport_error(self, session: MagicMock) -> None:
        session.post.side_effect = requests.ConnectionError("connection refused")
        with pytest.raises(TransportError, match="connection refused"):
            post_json("https://pocket.test/v3/get", {}, session)

    def test_invalid_json_body(self, session: MagicMock) -> None:
        session.post.return_value = fake_response(200, json_data=None, text="<html>")
        with pytest.raises(RemoteAPIError, match="Invalid JSON"):
            post_json("https://pocket.test/v3/get", {}, session)


# ---------------------------------------------------------------------------
# PocketClient
# ---------------------------------------------------------------------------

class TestPocketClient:
    def test_requires_full_credential(self) -> None:
        with pytest.raises(ConfigError):
            PocketClient(Credential(consumer_key="key", access_token=""))

    def test_post_adds_credential(self, session: MagicMock) -> None:
        session.post.return_value = fake_response(json_data={})
        _client(session).post("/v3/get", {"count": 1})
        url = session.post.call_args.args[0]
        payload = session.post.call_args.kwargs["json"]
        assert url == "https://pocket.test/v3/get"
        assert payload == {"count": 1, "consumer_key": "1234-abcd", "access_token": "5678-defg"}

    def test_retrieve_parses_items(self, session: MagicMock) -> None:
        session.post.return_value = fake_response(
            json_data={
                "status": 1,
                "list": {
                    "1": {"item_id": "1", "given_url": "https://a.com", "sort_id": 1},
                    "2": {"item_id": "2", "resolved_url": "https://b.com", "sort_id": 0},
                },
            }
        )
        items = _client(session).retrieve(RetrieveOptions(domain="a.com", sort="newest"))
        assert sorted(item.item_id for item in items) == [1, 2]
        payload = session.post.call_args.kwargs["json"]
        assert payload["domain"] == "a.com"
        assert payload["sort"] == "newest"

    def test_retrieve_empty_list_quirk(self, session: MagicMock) -> None:
        session.post.return_value = fake_response(json_data={"status": 2, "list": []})
        assert _client(session).retrieve() == []

    def test_retrieve_rejects_unknown_sort(self, session: MagicMock) -> None:
        with pytest.raises(ConfigError, match="Invalid sort"):
            _client(session).retrieve(RetrieveOptions(sort="random"))
        session.post.assert_not_called()

    def test_add(self, session: MagicMock) -> None:
        session.post.return_value = fake_response(
            json_data={"item": {"item_id": "99", "normal_url": "https://a.com"}, "status": 1}
        )
        item = _client(session).add(AddOptions(url="https://a.com", title="A"))
        assert item.item_id == 99
        assert session.post.call_args.args[0] == "https://pocket.test/v3/add"
        assert session.post.call_args.kwargs["json"]["title"] == "A"

    def test_modify_serializes_actions(self, session: MagicMock) -> None:
        session.post.return_value = fake_response(json_data={"action_results": [True, True], "status": 1})
        result = _client(session).modify(Action.delete(1), Action.archive(2))
        assert result.ok
        payload = session.post.call_args.kwargs["json"]
        assert session.post.call_args.args[0] == "https://pocket.test/v3/send"
        assert payload["actions"] == [
            {"action": "delete", "item_id": "1"},
            {"action": "archive", "item_id": "2"},
        ]

    def test_modify_logs_failed_actions(self, session: MagicMock, caplog: pytest.LogCaptureFixture) -> None:
        session.post.return_value = fake_response(json_data={"action_results": [True, False], "status": 1})
        with caplog.at_level(logging.WARNING, logger="pocket_cull.api.client"):
            result = _client(session).modify(Action.delete(1), Action.delete(2))
        assert not result.ok
        assert "on item 2 failed" in caplog.text

    def test_delete_shortcut(self, session: MagicMock) -> None:
        session.post.return_value = fake_response(json_data={"action_results": [True], "status": 1})
        assert _client(session).delete(5).ok
        assert session.post.call_args.kwargs["json"]["actions"] == [{"action": "delete", "item_id": "5"}]
