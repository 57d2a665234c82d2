"""Shared pytest fixtures for the pocket-cull test suite.

No test touches the internet: the HTTP session is a MagicMock and the
OAuth callback listener only talks over loopback.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest
from requests.structures import CaseInsensitiveDict

from pocket_cull.api.models import Item, ModifyResult
from pocket_cull.config import Config


class ScriptedPrompter:
    """Answers confirmations from a fixed list and records every question."""

    def __init__(self, answers: list[bool] | None = None) -> None:
        self.answers = list(answers or [])
        self.questions: list[str] = []

    def confirm(self, message: str) -> bool:
        self.questions.append(message)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {message!r}")
        answer = self.answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        return answer


def fake_response(
    status: int = 200,
    json_data: Any = None,
    *,
    headers: dict[str, str] | None = None,
    text: str = "",
    url: str = "",
    reason: str = "OK",
) -> MagicMock:
    """A stand-in for requests.Response."""
    response = MagicMock()
    response.status_code = status
    response.reason = reason
    response.headers = CaseInsensitiveDict(headers or {})
    response.text = text
    response.url = url
    if json_data is None:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = json_data
    return response


def make_item(item_id: int, url: str, sort_id: int = 0, title: str = "") -> Item:
    return Item(item_id=item_id, given_url=url, given_title=title or f"Item {item_id}", sort_id=sort_id)


def ok_modify(n: int = 1) -> ModifyResult:
    return ModifyResult(action_results=[True] * n, status=1)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "POCKET_CONSUMER_KEY",
        "POCKET_CONFIG_DIR",
        "POCKET_AUTH_TIMEOUT",
        "POCKET_PROBE_TIMEOUT",
        "POCKET_NO_BROWSER",
        "POCKET_ORIGIN",
        "POCKET_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config(tmp_path) -> Config:
    return Config(
        config_dir=tmp_path / "pocket",
        origin="https://pocket.test",
        auth_timeout=5.0,
        probe_timeout=1.0,
        open_browser=False,
    )


@pytest.fixture
def session() -> MagicMock:
    return MagicMock()
