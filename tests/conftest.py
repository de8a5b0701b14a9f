"""Test configuration and fixtures for TopicPress tests."""

import pytest
import tempfile
import shutil
import os
from pathlib import Path

SAMPLE_ARTICLE = """---
title: Drafting in Plain Text
date: 2024-03-01
topic: writing
tags: [personal, web]
---

Notes on #writing and my #workflow.

```
# a comment with #ignore
```
"""

UNDATED_LOVE = """---
tags: love
date: not a date
---

Something about #love.
"""

LATE_LOVE = """---
title: Later
date: 2024-05-01
---

More #love here.
"""

EARLY_LOVE = """---
title: Earlier
date: 2023-01-15
---

#love at the start of the text.
"""


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def mock_content_dir(temp_dir):
    """Create a content directory with a nested folder and several articles."""
    content_dir = Path(temp_dir) / 'content'
    nested_dir = content_dir / 'notes'
    nested_dir.mkdir(parents=True)

    (content_dir / 'plain-text.md').write_text(SAMPLE_ARTICLE, encoding='utf-8')
    (content_dir / 'hello-world.md').write_text("Just a body, nothing else.\n", encoding='utf-8')
    (nested_dir / 'undated.markdown').write_text(UNDATED_LOVE, encoding='utf-8')
    (nested_dir / 'late.md').write_text(LATE_LOVE, encoding='utf-8')
    (nested_dir / 'early.MD').write_text(EARLY_LOVE, encoding='utf-8')
    (nested_dir / 'ignored.txt').write_text("#nope", encoding='utf-8')

    # Fixed mtime so the undeclared date of hello-world.md is stable
    os.utime(content_dir / 'hello-world.md', (1700000000, 1700000000))

    return str(content_dir)


@pytest.fixture
def mock_templates_dir(temp_dir):
    """Create a templates directory with minimal placeholder templates."""
    templates_dir = Path(temp_dir) / 'templates'
    templates_dir.mkdir()

    (templates_dir / 'article.html').write_text(
        "<title>{{ title }}</title><p>{{ date }}|{{ topicLabel }}|{{ missing }}</p>"
        "<div class=\"tags\">{{ tags }}</div><main>{{ content }}</main>",
        encoding='utf-8')
    (templates_dir / 'topic.html').write_text(
        "<h1>{{ topicLabel }}</h1><p>{{ topicCount }}</p><ul>{{ articles }}</ul>",
        encoding='utf-8')
    (templates_dir / 'index.html').write_text(
        "<h1>{{ siteTitle }}</h1><ul>{{ latest }}</ul><ul>{{ topics }}</ul>",
        encoding='utf-8')

    return str(templates_dir)


@pytest.fixture
def mock_static_dir(temp_dir):
    """Create a static directory with a nested binary asset."""
    static_dir = Path(temp_dir) / 'static'
    (static_dir / 'img').mkdir(parents=True)
    (static_dir / 'styles.css').write_text("body { color: black; }\n", encoding='utf-8')
    (static_dir / 'img' / 'dot.png').write_bytes(b'\x89PNG\r\n\x1a\n\x00\x01\x02')
    return str(static_dir)


@pytest.fixture
def mock_output_dir(temp_dir):
    """Create an output directory holding a stale page from an earlier build."""
    output_dir = Path(temp_dir) / 'dist'
    stale_dir = output_dir / 'old-topic' / 'removed'
    stale_dir.mkdir(parents=True)
    (stale_dir / 'index.html').write_text("stale", encoding='utf-8')
    return str(output_dir)
