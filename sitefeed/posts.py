"""
posts.py - Post model, immutable post collection and the front-matter loader
Post bodies are taken as HTML verbatim; nothing here renders Markdown.
"""
from __future__ import annotations
import logging
import re
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date as date_type, datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

import frontmatter
from dateutil.parser import parse as parse_date

logger = logging.getLogger(__name__)

POST_EXTS = {'.md', '.markdown', '.html', '.htm'}

_DATE_PREFIX = re.compile(r'^(\d{4}-\d{2}-\d{2})-(.+)$')


@dataclass(frozen=True)
class Post:
    slug: str
    date: datetime
    title: Optional[str] = None
    content: Optional[str] = None
    path: Optional[str] = None     # relative to the site base URL
    image: Optional[str] = None
    updated: Optional[datetime] = None
    description: Optional[str] = None
    excerpt: Optional[str] = None
    categories: tuple = ()
    tags: tuple = ()

    @property
    def link_path(self) -> str:
        return self.path if self.path is not None else f'{self.slug}/'

    @property
    def last_modified(self) -> datetime:
        return self.updated or self.date


class PostCollection(Sequence):
    """
    Ordered, read-only sequence of posts.
    sort() and limit() return new collections and leave this one alone.
    """

    def __init__(self, posts: Iterable[Post] = ()):
        self._posts = tuple(posts)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return PostCollection(self._posts[index])
        return self._posts[index]

    def __len__(self) -> int:
        return len(self._posts)

    def __eq__(self, other) -> bool:
        if isinstance(other, PostCollection):
            return self._posts == other._posts
        return NotImplemented

    def __repr__(self) -> str:
        return f'PostCollection({len(self._posts)} posts)'

    def sort(self, key: str = '-date') -> 'PostCollection':
        """Stable sort by a post attribute; a leading '-' sorts descending."""
        reverse = key.startswith('-')
        attr = key.lstrip('-')
        if attr not in Post.__dataclass_fields__:
            raise ValueError(f'cannot sort posts by {attr!r}')
        # sorted() is stable for reverse=True too, ties keep their order
        return PostCollection(sorted(
            self._posts,
            key=lambda p: _sort_value(getattr(p, attr)),
            reverse=reverse,
        ))

    def limit(self, n: int) -> 'PostCollection':
        return PostCollection(self._posts[:n])

    def first(self) -> Optional[Post]:
        return self._posts[0] if self._posts else None


def _sort_value(value):
    if value is None:
        return (0, '')
    if isinstance(value, datetime):
        return (1, _as_utc(value))
    return (1, value)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ─── Loading ────────────────────────────────────────────────────────────────
def _parse_filename(stem: str) -> tuple[Optional[str], str]:
    """Extract (date_str, slug) from filename stem."""
    m = _DATE_PREFIX.match(stem)
    if m:
        return m.group(1), m.group(2)
    return None, stem


def _to_datetime(value) -> Optional[datetime]:
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date_type):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    return _as_utc(parse_date(str(value)))


def _as_tuple(value) -> tuple:
    if not value:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value)
    return (str(value),)


def permalink_path(pattern: str, slug: str, date: datetime) -> str:
    """Fill a Hexo-style permalink pattern (:year/:month/:day/:title/)."""
    values = {
        ':year': f'{date.year:04d}',
        ':month': f'{date.month:02d}',
        ':day': f'{date.day:02d}',
        ':title': slug,
        ':slug': slug,
    }
    return re.sub(r':(year|month|day|title|slug)', lambda m: values[m.group(0)], pattern)


def load_post(path: Path, permalink: str = ':year/:month/:day/:title/') -> Post:
    date_str, slug = _parse_filename(path.stem)
    post = frontmatter.load(str(path))
    meta = post.metadata

    slug = str(meta.get('slug') or slug)
    date = _to_datetime(meta.get('date')) or _to_datetime(date_str)
    if date is None:
        date = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)

    return Post(
        slug=slug,
        date=date,
        title=str(meta['title']) if meta.get('title') else None,
        content=(post.content or '').strip() or None,
        path=meta.get('path') or permalink_path(permalink, slug, date),
        image=meta.get('image') or None,
        updated=_to_datetime(meta.get('updated')),
        description=meta.get('description') or None,
        excerpt=meta.get('excerpt') or None,
        categories=_as_tuple(meta.get('categories')),
        tags=_as_tuple(meta.get('tags')),
    )


def load_posts(posts_dir: Path, permalink: str = ':year/:month/:day/:title/') -> PostCollection:
    """Load every post file under posts_dir, skipping files that fail to parse."""
    posts_dir = Path(posts_dir)
    if not posts_dir.exists():
        return PostCollection()

    posts: list[Post] = []
    for f in sorted(posts_dir.rglob('*')):
        if not f.is_file() or f.suffix.lower() not in POST_EXTS:
            continue
        try:
            posts.append(load_post(f, permalink))
        except Exception as e:
            print(f'  WARNING: failed to load {f}: {e}', file=sys.stderr)
            continue
    logger.debug('loaded %d post(s) from %s', len(posts), posts_dir)
    return PostCollection(posts)
