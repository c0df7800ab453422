"""Tests for autodiscovery link injection."""

import pytest

from sitefeed.autodiscovery import has_feed_link, head_regions, inject
from sitefeed.config import FeedConfig, FeedConfigError, SiteConfig

ATOM_LINK = '<link rel="alternate" href="/atom.xml" title="foo" type="application/atom+xml">'


@pytest.fixture
def config():
    return SiteConfig(
        title='foo',
        root='/',
        feed=FeedConfig(type='atom', path='atom.xml', autodiscovery=True),
    )


class TestInject:
    """Tests for inject."""

    def test_default(self, config):
        assert inject('<head><link></head>', config) == f'<head><link>{ATOM_LINK}</head>'

    def test_prepend_root(self, config):
        config.root = '/root/'
        assert inject('<head><link></head>', config) == (
            '<head><link><link rel="alternate" href="/root/atom.xml" title="foo"'
            ' type="application/atom+xml"></head>'
        )

    def test_disabled(self, config):
        config.feed.autodiscovery = False
        assert inject('<head><link></head>', config) is None

    def test_no_duplicate_tag(self, config):
        content = f'<head><link>{ATOM_LINK}</head>'
        assert inject(content, config) is None

    def test_rerun_is_noop(self, config):
        once = inject('<html><head><title>t</title></head><body></body></html>', config)
        assert once is not None
        assert inject(once, config) is None

    def test_duplicate_anywhere_in_document(self, config):
        content = f'<head><meta charset="utf-8"></head><body>{ATOM_LINK}</body>'
        assert inject(content, config) is None

    def test_duplicate_with_other_attribute_order(self, config):
        content = ("<head><link type='application/atom+xml' href='/x.xml'"
                   " rel='alternate stylesheet'></head>")
        assert inject(content, config) is None

    def test_other_feed_type_is_not_a_duplicate(self, config):
        content = ('<head><link rel="alternate" href="/rss2.xml" title="foo"'
                   ' type="application/rss+xml"></head>')
        assert inject(content, config) == content[:-len('</head>')] + ATOM_LINK + '</head>'

    def test_ignore_empty_head_tag(self, config):
        content = '<head></head><head><link></head><head></head>'
        assert inject(content, config) == \
            f'<head></head><head><link>{ATOM_LINK}</head><head></head>'

    def test_first_non_empty_head_only(self, config):
        content = '<head></head><head><link></head><head><link></head>'
        assert inject(content, config) == \
            f'<head></head><head><link>{ATOM_LINK}</head><head><link></head>'

    def test_whitespace_only_head_is_empty(self, config):
        content = '<head>\n  \n</head><head><meta></head>'
        assert inject(content, config) == f'<head>\n  \n</head><head><meta>{ATOM_LINK}</head>'

    def test_rss2(self, config):
        config.feed = FeedConfig(type='rss2', path='rss2.xml', autodiscovery=True)
        assert inject('<head><link></head>', config) == (
            '<head><link><link rel="alternate" href="/rss2.xml" title="foo"'
            ' type="application/rss+xml"></head>'
        )

    def test_multi_line_head_tag(self, config):
        assert inject('<head>\n<link>\n</head>', config) == f'<head>\n<link>\n{ATOM_LINK}</head>'

    def test_head_with_attributes_and_upper_case(self, config):
        content = '<HTML><HEAD lang="en">\n  <TITLE>x</TITLE>\n</HEAD></HTML>'
        assert inject(content, config) == \
            f'<HTML><HEAD lang="en">\n  <TITLE>x</TITLE>\n{ATOM_LINK}</HEAD></HTML>'

    def test_header_is_not_head(self, config):
        assert inject('<body><header><nav></nav></header></body>', config) is None

    def test_no_head(self, config):
        assert inject('<p>no head here</p>', config) is None
        assert inject('<head></head>', config) is None

    def test_unclosed_head(self, config):
        assert inject('<head><link>', config) is None

    def test_title_is_escaped(self, config):
        config.title = 'Tom & "Jerry"'
        result = inject('<head><link></head>', config)
        assert 'title="Tom &amp; &quot;Jerry&quot;"' in result

    def test_unknown_type_is_rejected(self, config):
        config.feed.type = 'json'
        with pytest.raises(FeedConfigError):
            inject('<head><link></head>', config)

    def test_default_path_follows_type(self, config):
        config.feed = FeedConfig(type='rss2', autodiscovery=True)
        assert 'href="/rss2.xml"' in inject('<head><link></head>', config)


class TestScanner:
    """Tests for the head/link scanning helpers."""

    def test_head_regions_in_order(self):
        doc = '<head></head>x<head><meta></head>'
        regions = list(head_regions(doc))

        assert [doc[r.start:r.end] for r in regions] == ['<head></head>', '<head><meta></head>']
        assert [r.is_empty(doc) for r in regions] == [True, False]

    def test_comment_counts_as_child(self):
        doc = '<head><!-- meta --></head>'
        assert not next(head_regions(doc)).is_empty(doc)

    def test_has_feed_link(self):
        assert has_feed_link(ATOM_LINK, 'application/atom+xml')
        assert not has_feed_link(ATOM_LINK, 'application/rss+xml')
        assert not has_feed_link('<link rel="stylesheet" type="application/atom+xml">',
                                 'application/atom+xml')
        assert has_feed_link('<LINK REL=alternate TYPE=application/atom+xml>',
                             'application/atom+xml')
