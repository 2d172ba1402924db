"""Shared test fixtures for sitesmith."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from sitesmith.config.models import FeedConfig, SiteConfig
from sitesmith.content.models import Document
from sitesmith.output.paths import resolve_output_path

BASE_LAYOUT = """\
<!doctype html>
<title>{{ title }} | {{ metadata.title }}</title>
<main>{{ content | safe }}</main>
"""

POST_LAYOUT = """\
---
layout: layouts/base.njk
section: blog
---
<article data-section="{{ section }}">{{ content | safe }}</article>
"""

INDEX_TEMPLATE = """\
---
title: Home
---
<ul>
{% for post in collections.posts | reverse %}<li><a href="{{ post.url }}">{{ post.data.title }}</a> <time datetime="{{ post.date | htmlDateString }}">{{ post.date | readableDate }}</time></li>
{% endfor %}</ul>
"""

FIRST_POST = """\
---
title: First Post
tags: [posts]
date: 2025-06-06
layout: layouts/post.njk
---
# Hello

Body text with an [internal link](/about/).

```python
print("hi")
```
"""

SECOND_POST = """\
---
title: Second Post
tags:
  - posts
  - posts
date: 2025-06-10T12:30:00Z
layout: layouts/post.njk
---
Second body.
"""

DRAFT_POST = """\
---
title: Draft Post
tags: posts
draft: true
date: 2025-06-08
---
Not ready.
"""

ABOUT_PAGE = """\
---
title: About
navigation:
  key: About
  order: 2
---
About this site.
"""


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """A small blog: layouts, data, three posts (one draft), passthrough files."""
    root = tmp_path / "site"
    (root / "_includes" / "layouts").mkdir(parents=True)
    (root / "_includes" / "layouts" / "base.njk").write_text(BASE_LAYOUT)
    (root / "_includes" / "layouts" / "post.njk").write_text(POST_LAYOUT)
    (root / "_data").mkdir()
    (root / "_data" / "metadata.yaml").write_text("title: Test Blog\n")
    (root / "posts").mkdir()
    (root / "posts" / "2025-06-06-first.md").write_text(FIRST_POST)
    (root / "posts" / "2025-06-10-second.md").write_text(SECOND_POST)
    (root / "posts" / "2025-06-08-draft.md").write_text(DRAFT_POST)
    (root / "about.md").write_text(ABOUT_PAGE)
    (root / "index.njk").write_text(INDEX_TEMPLATE)
    (root / "css").mkdir()
    (root / "css" / "site.css").write_text("body { color: black; }\n")
    (root / "CNAME").write_text("example.com\n")
    return root


@pytest.fixture
def site_config(site_root: Path, tmp_path: Path) -> SiteConfig:
    return SiteConfig(
        content_root=str(site_root),
        output_root=str(tmp_path / "_site"),
        passthrough=["css", "CNAME"],
        worker_count=2,
        feed=FeedConfig(url="https://example.com/", title="Test Blog", author_name="Tester"),
    )


@pytest.fixture
def make_doc():
    """Factory for in-memory Documents with derived output paths."""

    def _make(source_path: str, body: str = "", day: int = 1, **front_matter) -> Document:
        tags = front_matter.get("tags", [])
        if isinstance(tags, str):
            tags = [tags]
        output_path, url = resolve_output_path(source_path, front_matter)
        return Document(
            source_path=source_path,
            input_path=f"/content/{source_path}",
            template_format=Path(source_path).suffix.lstrip("."),
            file_slug=Path(source_path).stem,
            body=body,
            date=datetime(2025, 6, day, tzinfo=timezone.utc),
            front_matter=front_matter,
            tags=frozenset(tags),
            output_path=output_path,
            url=url,
        )

    return _make
