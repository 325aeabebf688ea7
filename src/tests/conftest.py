"""Shared fixtures for scrape_rules tests."""

import pytest

from scrape_rules.settings import get_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so env overrides apply per test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def news_html():
    """Minimal news article document."""
    return (
        '<h1>Breaking News</h1>'
        '<div class=author>John Doe</div>'
        '<div class=p>A</div>'
        '<div class=p>B</div>'
    )


@pytest.fixture
def article_html():
    """News article with nested sections, links and padded text."""
    return '''<!DOCTYPE html>
    <html>
    <head><title>Sample Article</title></head>
    <body>
        <h1 class="title">Breaking News</h1>
        <div class="author">John Doe</div>
        <div class="paragraph">This is the first paragraph.</div>
        <div class="paragraph">This is the second paragraph.</div>
        <section class="post">
            <h2>First</h2>
            <a href="/first" class="more">Read
                more</a>
        </section>
        <section class="post">
            <h2>Second</h2>
            <a class="more">Read more</a>
        </section>
        <ul class="tags">
            <li><a href="/tag/jobs">jobs</a></li>
            <li><a href="/tag/regions">regions</a></li>
        </ul>
    </body>
    </html>'''
