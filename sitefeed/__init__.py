"""sitefeed - Atom / RSS 2.0 feeds and feed autodiscovery for static sites."""
from sitefeed.autodiscovery import inject
from sitefeed.config import FeedConfig, FeedConfigError, SiteConfig, load_config
from sitefeed.generator import FeedFile, generate
from sitefeed.posts import Post, PostCollection, load_posts

__all__ = [
    'FeedConfig', 'FeedConfigError', 'FeedFile', 'Post', 'PostCollection',
    'SiteConfig', 'generate', 'inject', 'load_config', 'load_posts',
]
