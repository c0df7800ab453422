"""
autodiscovery.py - Adds the feed's <link rel="alternate"> tag to rendered pages

Only <head> and <link> tags are located, with regular expressions. Everything
outside the inserted tag is returned byte for byte, so the document is never
parsed and re-serialized.
"""
from __future__ import annotations
import html as html_lib
import logging
import re
from typing import Iterator, NamedTuple, Optional

from sitefeed.config import SiteConfig
from sitefeed.urls import join_root

logger = logging.getLogger(__name__)

_HEAD_OPEN = re.compile(r'<head(?=[\s/>])[^>]*>', re.IGNORECASE)
_HEAD_CLOSE = re.compile(r'</head\s*>', re.IGNORECASE)
_CHILD_TAG = re.compile(r'<[a-zA-Z!]')
_LINK_TAG = re.compile(r'<link(?=[\s/>])[^>]*>', re.IGNORECASE)
_ATTR = re.compile(r'''([^\s"'=/>]+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+)))?''')


class HeadRegion(NamedTuple):
    start: int          # index of '<head'
    inner_start: int    # just past the opening tag
    inner_end: int      # index of '</head'
    end: int            # just past the closing tag

    def is_empty(self, document: str) -> bool:
        return _CHILD_TAG.search(document, self.inner_start, self.inner_end) is None


def head_regions(document: str) -> Iterator[HeadRegion]:
    """Yield <head>...</head> spans in document order."""
    pos = 0
    while True:
        opening = _HEAD_OPEN.search(document, pos)
        if opening is None:
            return
        closing = _HEAD_CLOSE.search(document, opening.end())
        if closing is None:
            return
        yield HeadRegion(opening.start(), opening.end(), closing.start(), closing.end())
        pos = closing.end()


def _attributes(tag: str) -> dict[str, str]:
    # skip '<link'; a self-closing '/' never matches an attribute name
    body = tag[5:-1]
    attrs = {}
    for m in _ATTR.finditer(body):
        value = next((g for g in m.group(2, 3, 4) if g is not None), '')
        attrs.setdefault(m.group(1).lower(), html_lib.unescape(value))
    return attrs


def has_feed_link(document: str, link_type: str) -> bool:
    """True when any <link rel="alternate" type=link_type> exists in the document."""
    for m in _LINK_TAG.finditer(document):
        attrs = _attributes(m.group(0))
        rels = attrs.get('rel', '').lower().split()
        if 'alternate' in rels and attrs.get('type', '').strip().lower() == link_type:
            return True
    return False


def feed_link_tag(config: SiteConfig) -> str:
    feed = config.feed
    href = join_root(config.root, feed.output_path)
    return (f'<link rel="alternate" href="{html_lib.escape(href)}"'
            f' title="{html_lib.escape(str(config.title or ""))}"'
            f' type="{feed.link_type}">')


def inject(document: str, config: SiteConfig) -> Optional[str]:
    """
    Insert the feed link before the first non-empty </head>.
    Returns None when nothing should change: autodiscovery is off, the link is
    already present somewhere in the document, or there is no usable head.
    """
    feed = config.feed
    if not feed.autodiscovery:
        return None

    link_type = feed.link_type
    if has_feed_link(document, link_type):
        logger.debug('%s link already present, skipping', link_type)
        return None

    for region in head_regions(document):
        if region.is_empty(document):
            continue
        tag = feed_link_tag(config)
        return document[:region.inner_end] + tag + document[region.inner_end:]

    logger.debug('no non-empty <head> found, skipping')
    return None
