#!/usr/bin/env python3
"""
Data objects exchanged with the Pocket API.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

VALID_SORTS = ('newest', 'oldest', 'title', 'site')
VALID_STATES = ('unread', 'archive', 'all')


def _to_int(value, default=0):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_datetime(timestamp):
    """Convert a Unix timestamp (Pocket sends strings) to an aware UTC datetime."""
    return datetime.fromtimestamp(_to_int(timestamp), tz=timezone.utc)


@dataclass(frozen=True)
class Credential:
    consumer_key: str
    access_token: str
    username: str = ""

    def auth_fields(self):
        return {'consumer_key': self.consumer_key, 'access_token': self.access_token}


@dataclass(frozen=True)
class Item:
    item_id: int
    given_url: str = ""
    resolved_url: str = ""
    given_title: str = ""
    resolved_title: str = ""
    time_added: datetime = field(default_factory=lambda: _to_datetime(0))
    sort_id: int = 0
    excerpt: str = ""
    status: str = "0"

    @property
    def url(self):
        return self.resolved_url or self.given_url

    @property
    def title(self):
        return self.resolved_title or self.given_title

    @classmethod
    def from_api(cls, data):
        """Build an Item from one entry of a /v3/get "list" object."""
        return cls(
            item_id=_to_int(data.get('item_id')),
            given_url=data.get('given_url') or "",
            resolved_url=data.get('resolved_url') or "",
            given_title=data.get('given_title') or "",
            resolved_title=data.get('resolved_title') or "",
            time_added=_to_datetime(data.get('time_added')),
            sort_id=_to_int(data.get('sort_id')),
            excerpt=data.get('excerpt') or "",
            status=str(data.get('status', '0')),
        )


@dataclass(frozen=True)
class Action:
    action: str
    item_id: int

    @classmethod
    def archive(cls, item_id):
        return cls('archive', item_id)

    @classmethod
    def delete(cls, item_id):
        return cls('delete', item_id)

    def to_api(self):
        # The send endpoint expects item ids as strings.
        return {'action': self.action, 'item_id': str(self.item_id)}


@dataclass
class ModifyResult:
    action_results: List[bool] = field(default_factory=list)
    action_errors: list = field(default_factory=list)
    status: int = 0

    @classmethod
    def from_api(cls, data):
        return cls(
            action_results=[bool(r) for r in data.get('action_results') or []],
            action_errors=list(data.get('action_errors') or []),
            status=_to_int(data.get('status')),
        )

    @property
    def ok(self):
        return self.status == 1 and all(self.action_results)


@dataclass
class RetrieveOptions:
    state: Optional[str] = None
    favorite: Optional[bool] = None
    tag: Optional[str] = None
    content_type: Optional[str] = None
    sort: Optional[str] = None
    detail_type: Optional[str] = None
    search: Optional[str] = None
    domain: Optional[str] = None
    since: Optional[int] = None
    count: Optional[int] = None
    offset: Optional[int] = None

    def to_api(self) -> Dict[str, object]:
        data = {
            'state': self.state,
            'tag': self.tag,
            'contentType': self.content_type,
            'sort': self.sort,
            'detailType': self.detail_type,
            'search': self.search,
            'domain': self.domain,
            'since': self.since,
            'count': self.count,
            'offset': self.offset,
        }
        if self.favorite is not None:
            data['favorite'] = 1 if self.favorite else 0
        return {k: v for k, v in data.items() if v not in (None, "")}


@dataclass
class AddOptions:
    url: str
    title: Optional[str] = None
    tags: Optional[str] = None

    def to_api(self) -> Dict[str, object]:
        data = {'url': self.url, 'title': self.title, 'tags': self.tags}
        return {k: v for k, v in data.items() if v}
