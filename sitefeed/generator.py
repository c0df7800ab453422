"""
generator.py - Atom / RSS 2.0 feed generator for sitefeed
Sorts and limits the posts, resolves the site and feed URLs, and hands the
context to a render function (the bundled Jinja2 templates by default).
"""
from __future__ import annotations
import logging
from typing import Callable, Iterable, NamedTuple, Optional

from sitefeed.config import SiteConfig
from sitefeed.posts import Post, PostCollection
from sitefeed.render import render as render_template
from sitefeed.urls import encode_url, join_root, site_url

logger = logging.getLogger(__name__)

RenderFunc = Callable[[str, dict], str]

TEMPLATES = {
    'atom': 'atom.xml',
    'rss2': 'rss2.xml',
}


class FeedFile(NamedTuple):
    path: str
    data: str


def select_posts(posts: Iterable[Post], config: SiteConfig) -> PostCollection:
    """Newest first (or feed.order_by), cut to feed.limit when it is positive."""
    if not isinstance(posts, PostCollection):
        posts = PostCollection(posts)
    selected = posts.sort(config.feed.order_key)
    limit = config.feed.post_limit
    if limit:
        selected = selected.limit(limit)
    return selected


def build_context(config: SiteConfig, posts: Iterable[Post]) -> dict:
    feed = config.feed
    return {
        'config': config,
        'url': site_url(config.url, config.root),
        'posts': select_posts(posts, config),
        'feed_url': encode_url(join_root(config.root, feed.output_path)),
    }


def generate(config: SiteConfig, posts: Iterable[Post],
             render: Optional[RenderFunc] = None) -> FeedFile:
    """
    Render the configured feed.
    posts: any iterable of Post, e.g. a PostCollection from load_posts()
    render: render(template_name, context) -> str, defaults to sitefeed.render.render
    Raises FeedConfigError for an unknown feed type, a bad limit or a bad order_by.
    """
    feed_type = config.feed.feed_type
    path = config.feed.output_path
    context = build_context(config, posts)
    logger.debug('generating %s feed at %s with %d post(s)',
                  feed_type, path, len(context['posts']))

    render = render or render_template
    return FeedFile(path=path, data=render(TEMPLATES[feed_type], context))
