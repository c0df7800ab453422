"""
build.py - Feed builder for a generated static site
Usage: sitefeed --config _config.yml --posts source/_posts --public public [--dry-run]
"""
from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path

from sitefeed.autodiscovery import inject
from sitefeed.config import FeedConfigError, SiteConfig, load_config
from sitefeed.generator import FeedFile, generate
from sitefeed.posts import PostCollection, load_posts


# ─── Steps ──────────────────────────────────────────────────────────────────
def write_feed(feed: FeedFile, public_dir: Path) -> Path:
    out = public_dir / feed.path.lstrip('/')
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(feed.data, encoding='utf-8')
    return out


def inject_pages(public_dir: Path, config: SiteConfig, dry_run: bool = False) -> int:
    """Add the autodiscovery link to every HTML page; returns the number changed."""
    changed = 0
    for page in sorted(public_dir.rglob('*.html')):
        html = page.read_text(encoding='utf-8')
        result = inject(html, config)
        if result is None:
            continue
        changed += 1
        if not dry_run:
            page.write_text(result, encoding='utf-8')
    return changed


def build(config: SiteConfig, posts: PostCollection, public_dir: Path,
          dry_run: bool = False) -> FeedFile:
    feed = generate(config, posts)
    if dry_run:
        print(f'  Would write {feed.path} ({len(feed.data)} chars)')
    else:
        out = write_feed(feed, public_dir)
        print(f'  Generated {out}')

    if public_dir.exists():
        changed = inject_pages(public_dir, config, dry_run=dry_run)
        print(f'  Autodiscovery link added to {changed} page(s)')
    return feed


# ─── Main ────────────────────────────────────────────────────────────────────
def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description='Generate an Atom/RSS feed for a static site')
    parser.add_argument('--config', default='_config.yml', type=Path,
                        help='Site configuration (YAML)')
    parser.add_argument('--posts', default='source/_posts', type=Path,
                        help='Directory of post files with front matter')
    parser.add_argument('--public', default='public', type=Path,
                        help='Generated site directory')
    parser.add_argument('--dry-run', action='store_true',
                        help='Render everything but write nothing')
    parser.add_argument('-v', '--verbose', action='store_true')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    try:
        config = load_config(args.config)
    except FeedConfigError as e:
        print(f'ERROR: {e}', file=sys.stderr)
        return 1

    print('Loading posts...')
    posts = load_posts(args.posts, config.permalink)
    print(f'  {len(posts)} post(s)')

    try:
        build(config, posts, args.public, dry_run=args.dry_run)
    except FeedConfigError as e:
        print(f'ERROR: {e}', file=sys.stderr)
        return 1

    print('\nFeed build complete.')
    return 0


if __name__ == '__main__':
    sys.exit(main())
