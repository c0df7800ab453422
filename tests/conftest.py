"""Shared fixtures for the sitefeed tests."""

from datetime import datetime, timedelta, timezone

import pytest

from sitefeed.config import FeedConfig, SiteConfig
from sitefeed.posts import Post, PostCollection

BASE_DATE = datetime(1970, 1, 2, 3, 46, 40, tzinfo=timezone.utc)


@pytest.fixture
def posts():
    """Three posts: foo (with HTML content), bar (newest), baz (oldest, with image)."""
    return PostCollection([
        Post(slug='foo', content='<h6>TestHTML</h6>', date=BASE_DATE),
        Post(slug='bar', date=BASE_DATE + timedelta(seconds=1)),
        Post(slug='baz', title='With Image', image='test.png',
             date=BASE_DATE - timedelta(seconds=1)),
    ])


@pytest.fixture
def config():
    """Fresh site config; each test mutates its own copy."""
    return SiteConfig(
        url='http://localhost/',
        root='/',
        title='foo',
        feed=FeedConfig(type='atom', path='atom.xml'),
    )
