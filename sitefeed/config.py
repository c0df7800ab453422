"""
config.py - Site and feed configuration for sitefeed
Reads a Hexo-style _config.yml. Callers pass the config object into every
generate/inject call, so edits between calls are always picked up.
"""
from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

import yaml

from sitefeed.posts import Post


FEED_TYPES = ('atom', 'rss2')
DEFAULT_FEED_TYPE = 'atom'

LINK_TYPES = {
    'atom': 'application/atom+xml',
    'rss2': 'application/rss+xml',
}


class FeedConfigError(ValueError):
    """Raised for a feed configuration that cannot be rendered."""


@dataclass
class FeedConfig:
    type: Optional[str] = None
    path: Optional[str] = None
    limit: Optional[int] = None
    content: bool = False
    autodiscovery: bool = True
    order_by: str = '-date'
    hub: Optional[str] = None
    icon: Optional[str] = None
    content_limit: int = 140
    content_limit_delim: str = ''

    @property
    def feed_type(self) -> str:
        """The validated feed type; unset means atom."""
        if self.type is None or self.type == '':
            return DEFAULT_FEED_TYPE
        if self.type not in FEED_TYPES:
            raise FeedConfigError(
                f'unknown feed type {self.type!r}, expected one of {", ".join(FEED_TYPES)}'
            )
        return self.type

    @property
    def output_path(self) -> str:
        return self.path or f'{self.feed_type}.xml'

    @property
    def link_type(self) -> str:
        return LINK_TYPES[self.feed_type]

    @property
    def post_limit(self) -> Optional[int]:
        """Positive limit, or None for no limit (0 counts as no limit)."""
        limit = self.limit
        if limit is None:
            return None
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise FeedConfigError(f'feed limit must be an integer, got {limit!r}')
        if limit < 0:
            raise FeedConfigError(f'feed limit must not be negative, got {limit}')
        return limit or None

    @property
    def order_key(self) -> str:
        """order_by checked against the post fields; unset means newest first."""
        key = self.order_by or '-date'
        if not isinstance(key, str) or key.lstrip('-') not in Post.__dataclass_fields__:
            raise FeedConfigError(f'cannot order posts by {key!r}')
        return key

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'FeedConfig':
        return cls(**_known_keys(cls, _mapping('feed', data)))


@dataclass
class SiteConfig:
    url: str = 'http://localhost/'
    root: str = '/'
    title: str = ''
    subtitle: str = ''
    description: str = ''
    author: str = ''
    email: str = ''
    language: str = ''
    permalink: str = ':year/:month/:day/:title/'
    feed: FeedConfig = field(default_factory=FeedConfig)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'SiteConfig':
        data = dict(_mapping('site config', data))
        feed = data.pop('feed', None)
        return cls(feed=FeedConfig.from_dict(feed), **_known_keys(cls, data))


def _mapping(name: str, data) -> Mapping:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise FeedConfigError(f'{name} must be a mapping, got {type(data).__name__}')
    return data


def _known_keys(cls, data: dict) -> dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names and v is not None}


def load_config(path: Path) -> SiteConfig:
    """Load a SiteConfig from YAML; a missing or empty file gives the defaults."""
    path = Path(path)
    if not path.exists():
        return SiteConfig()
    data = yaml.safe_load(path.read_text(encoding='utf-8')) or {}
    return SiteConfig.from_dict(data)
