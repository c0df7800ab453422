"""
urls.py - URL helpers shared by the feed generator and autodiscovery
Hosts are punycoded, paths are percent-encoded without touching existing escapes.
"""
from __future__ import annotations
import re
from urllib.parse import quote, urlsplit, urlunsplit

import idna

# Same safe set as encodeURI, plus '%' (guarded by _LONE_PERCENT below)
_URI_SAFE = ";,/?:@&=+$!*'()#%"

_LONE_PERCENT = re.compile(r'%(?![0-9A-Fa-f]{2})')
_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f]')
_SCHEME = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*:')


def _quote(part: str) -> str:
    return quote(_LONE_PERCENT.sub('%25', part), safe=_URI_SAFE)


def _encode_host(netloc: str) -> str:
    userinfo, at, hostport = netloc.rpartition('@')
    if hostport.startswith('['):
        # IPv6 literal, leave alone
        return netloc
    host, colon, port = hostport.partition(':')
    if not host.isascii():
        host = idna.encode(host, uts46=True, transitional=False).decode('ascii')
    return f'{_quote(userinfo)}{at}{host}{colon}{port}'


def encode_url(value: str) -> str:
    """
    ASCII-safe encode a URL.
    Absolute URLs get their host punycoded; every part is percent-encoded
    with the encodeURI safe set. Valid %XX sequences pass through unchanged.
    """
    if not value:
        return value
    parts = urlsplit(value)
    if not (parts.scheme and parts.netloc):
        return _quote(value)
    return urlunsplit((
        parts.scheme,
        _encode_host(parts.netloc),
        _quote(parts.path),
        _quote(parts.query),
        _quote(parts.fragment),
    ))


def join_root(root: str, path: str) -> str:
    """Join the site root and a root-relative path with exactly one slash."""
    root = root or '/'
    path = path or ''
    if _SCHEME.match(path):
        return path
    head = root.rstrip('/')
    if not head and root.startswith('/'):
        return '/' + path.lstrip('/')
    return f"{head}/{path.lstrip('/')}"


def site_url(url: str, root: str = '/') -> str:
    """
    Absolute base URL of the site, always ending in a single '/'.
    The root is appended only when url does not already end with it,
    so 'http://host/blog' and '/blog/' give 'http://host/blog/'.
    """
    base = (url or '').rstrip('/')
    root_part = (root or '').strip('/')
    if root_part and not base.endswith('/' + root_part):
        base = f'{base}/{root_part}'
    return encode_url(base + '/')


def absolute_url(base: str, path: str) -> str:
    if not path:
        return base
    if _SCHEME.match(path) or path.startswith('//'):
        return path
    return base.rstrip('/') + '/' + path.lstrip('/')


def strip_control_chars(text) -> str:
    """Remove C0 control characters and DEL."""
    if text is None:
        return ''
    return _CONTROL_CHARS.sub('', str(text))
