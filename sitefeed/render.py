"""
render.py - Jinja2 environment and filters for the atom.xml / rss2.xml feed templates
"""
from __future__ import annotations
import mimetypes
import re
from datetime import datetime, timezone
from email.utils import format_datetime
from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from sitefeed.urls import absolute_url, encode_url, strip_control_chars

TEMPLATES_DIR = Path(__file__).parent / 'templates'

# Characters XML 1.0 forbids outright; tab, LF and CR are allowed
_XML_ILLEGAL = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]')
_TAG = re.compile(r'<[^>]+>')
_SPACES = re.compile(r'\s+')


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def iso_date(value: datetime) -> str:
    return _utc(value).replace(microsecond=0).isoformat().replace('+00:00', 'Z')


def rfc822_date(value: datetime) -> str:
    # Thu, 21 Aug 2025 07:00:00 GMT
    return format_datetime(_utc(value), usegmt=True)


def cdata(text) -> Markup:
    """Wrap text in a CDATA section; a literal ']]>' is split across two sections."""
    body = _XML_ILLEGAL.sub('', str(text or '')).replace(']]>', ']]]]><![CDATA[>')
    return Markup(f'<![CDATA[{body}]]>')


def media_type(path: str) -> str:
    guessed, _ = mimetypes.guess_type(path or '')
    return guessed or 'image'


def summary(post, feed) -> str:
    """description, then excerpt, then the start of the content as plain text."""
    if post.description:
        return strip_control_chars(post.description)
    text = post.excerpt or post.content
    if not text:
        return ''
    # newlines turn into spaces before control chars are stripped
    plain = strip_control_chars(_SPACES.sub(' ', _TAG.sub('', text)).strip())
    if post.excerpt:
        return plain
    limit = feed.content_limit
    if not limit or len(plain) <= limit:
        return plain
    cut = plain[:limit]
    delim = feed.content_limit_delim
    if delim and delim in cut:
        cut = cut[:cut.rindex(delim)]
    return cut


def _make_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATES_DIR)),
        autoescape=select_autoescape(['html', 'xml']),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters['uriencode'] = encode_url
    env.filters['absolute'] = lambda path, base: absolute_url(base, path)
    env.filters['no_control_chars'] = strip_control_chars
    env.filters['cdata'] = cdata
    env.filters['iso_date'] = iso_date
    env.filters['rfc822_date'] = rfc822_date
    env.filters['media_type'] = media_type
    env.globals['summary'] = summary
    return env


@lru_cache(maxsize=1)
def get_env() -> Environment:
    return _make_env()


def render(template_name: str, context: dict) -> str:
    """Render one of the bundled feed templates with the given context."""
    return get_env().get_template(template_name).render(**context)
