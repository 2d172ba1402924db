"""Tests for the content subsystem: front matter, loader, collections."""

from datetime import datetime, timezone

import pytest

from sitesmith.config.models import SiteConfig
from sitesmith.content.collections import build_collection, build_collections
from sitesmith.content.frontmatter import (
    coerce_tags,
    parse_frontmatter,
    split_date_prefix,
    split_frontmatter,
    to_utc,
)
from sitesmith.content.loader import DocumentLoader, load_global_data
from sitesmith.errors import NotFoundError, ParseError


# ---------------------------------------------------------------------------
# Front matter
# ---------------------------------------------------------------------------


class TestSplitFrontmatter:
    def test_splits(self):
        yaml_str, body = split_frontmatter("---\ntitle: x\n---\nbody\n")
        assert yaml_str == "title: x"
        assert body == "body\n"

    def test_no_frontmatter(self):
        assert split_frontmatter("# Title\n") == (None, "# Title\n")

    def test_empty_block(self):
        yaml_str, body = split_frontmatter("---\n---\nbody")
        assert yaml_str == ""
        assert body == "body"

    def test_dashes_inside_value_do_not_close(self):
        yaml_str, body = split_frontmatter("---\ntitle: a---b\n---\nbody")
        assert yaml_str == "title: a---b"
        assert body == "body"

    def test_horizontal_rule_in_body_kept(self):
        _, body = split_frontmatter("---\na: 1\n---\nabove\n---\nbelow\n")
        assert body == "above\n---\nbelow\n"


class TestParseFrontmatter:
    def test_mapping(self):
        data, body = parse_frontmatter("---\ntitle: Hi\ntags: [a, b]\n---\nText")
        assert data == {"title": "Hi", "tags": ["a", "b"]}
        assert body == "Text"

    def test_malformed_yaml_names_file(self):
        with pytest.raises(ParseError) as exc_info:
            parse_frontmatter("---\ntitle: [oops\n---\n", "posts/bad.md")
        assert exc_info.value.path == "posts/bad.md"
        assert "posts/bad.md" in str(exc_info.value)

    def test_non_mapping_rejected(self):
        with pytest.raises(ParseError, match="mapping"):
            parse_frontmatter("---\n- a\n- b\n---\n", "list.md")


class TestCoercion:
    def test_tags_string(self):
        assert coerce_tags("posts") == frozenset({"posts"})

    def test_tags_list_deduplicated(self):
        assert coerce_tags(["posts", "posts", "rust"]) == frozenset({"posts", "rust"})

    def test_tags_none(self):
        assert coerce_tags(None) == frozenset()

    def test_to_utc_naive_is_utc(self):
        assert to_utc(datetime(2025, 6, 6)) == datetime(2025, 6, 6, tzinfo=timezone.utc)

    def test_to_utc_iso_z(self):
        assert to_utc("2025-06-06T10:00:00Z") == datetime(2025, 6, 6, 10, tzinfo=timezone.utc)

    def test_to_utc_offset_converted(self):
        assert to_utc("2025-06-06T02:00:00+02:00") == datetime(2025, 6, 6, 0, tzinfo=timezone.utc)

    def test_to_utc_garbage(self):
        assert to_utc("yesterday") is None

    def test_date_prefix(self):
        dt, slug = split_date_prefix("2025-06-06-record-shredding-part-1")
        assert dt == datetime(2025, 6, 6, tzinfo=timezone.utc)
        assert slug == "record-shredding-part-1"

    def test_no_date_prefix(self):
        assert split_date_prefix("about") == (None, "about")

    @pytest.mark.parametrize("value", [True, "true", "True", "yes", " on ", "1", 1])
    def test_draft_truthy(self, make_doc, value):
        assert make_doc("a.md", draft=value).draft is True

    @pytest.mark.parametrize("value", [False, "false", "False", "no", "off", "0", "", None, 0])
    def test_draft_falsy(self, make_doc, value):
        assert make_doc("a.md", draft=value).draft is False

    def test_draft_absent(self, make_doc):
        assert make_doc("a.md").draft is False


# ---------------------------------------------------------------------------
# DocumentLoader
# ---------------------------------------------------------------------------


class TestDocumentLoader:
    def test_discovers_template_files_only(self, site_config):
        loader = DocumentLoader(site_config)
        rel = sorted(p.relative_to(loader.content_root).as_posix() for p in loader.discover())
        assert rel == [
            "about.md",
            "index.njk",
            "posts/2025-06-06-first.md",
            "posts/2025-06-08-draft.md",
            "posts/2025-06-10-second.md",
        ]

    def test_skips_passthrough_sources(self, site_root, site_config):
        (site_root / "css" / "notes.md").write_text("# not content")
        loader = DocumentLoader(site_config)
        assert all("css" not in p.parts for p in loader.discover())

    def test_skips_hidden_and_private(self, site_root, site_config):
        (site_root / ".cache").mkdir()
        (site_root / ".cache" / "x.md").write_text("x")
        (site_root / "_drafts").mkdir()
        (site_root / "_drafts" / "y.md").write_text("y")
        loader = DocumentLoader(site_config)
        names = {p.name for p in loader.discover()}
        assert "x.md" not in names
        assert "y.md" not in names

    def test_load_orders_by_date_then_path(self, site_config):
        docs = DocumentLoader(site_config).load()
        posts = [d.source_path for d in docs if "posts" in d.tags]
        assert posts == [
            "posts/2025-06-06-first.md",
            "posts/2025-06-08-draft.md",
            "posts/2025-06-10-second.md",
        ]

    def test_document_fields(self, site_config):
        docs = {d.source_path: d for d in DocumentLoader(site_config).load()}
        first = docs["posts/2025-06-06-first.md"]
        assert first.tags == frozenset({"posts"})
        assert first.date == datetime(2025, 6, 6, tzinfo=timezone.utc)
        assert first.file_slug == "first"
        assert first.template_format == "md"
        assert first.title == "First Post"
        assert first.body.startswith("# Hello")
        assert first.draft is False
        assert docs["posts/2025-06-08-draft.md"].data["draft"] is True

    def test_repeated_tags_are_a_set(self, site_config):
        docs = {d.source_path: d for d in DocumentLoader(site_config).load()}
        assert docs["posts/2025-06-10-second.md"].tags == frozenset({"posts"})

    def test_date_from_filename_prefix(self, site_root, site_config):
        (site_root / "posts" / "2024-01-02-undated.md").write_text("no front matter")
        docs = {d.source_path: d for d in DocumentLoader(site_config).load()}
        assert docs["posts/2024-01-02-undated.md"].date == datetime(2024, 1, 2, tzinfo=timezone.utc)

    def test_bad_date_is_parse_error(self, site_root, site_config):
        path = site_root / "odd.md"
        path.write_text("---\ndate: someday\n---\n")
        with pytest.raises(ParseError, match="odd.md"):
            DocumentLoader(site_config).load_file(path)

    def test_malformed_front_matter_raises(self, site_root, site_config):
        (site_root / "broken.md").write_text("---\ntitle: [unclosed\n---\n")
        with pytest.raises(ParseError) as exc_info:
            DocumentLoader(site_config).load()
        assert exc_info.value.path == "broken.md"

    def test_missing_content_root(self, tmp_path):
        config = SiteConfig(content_root=str(tmp_path / "missing"))
        with pytest.raises(NotFoundError):
            DocumentLoader(config).load()


class TestGlobalData:
    def test_reads_yaml_and_json(self, tmp_path):
        (tmp_path / "site.yaml").write_text("title: Blog\n")
        (tmp_path / "links.json").write_text('["a", "b"]')
        (tmp_path / "notes.txt").write_text("ignored")
        assert load_global_data(tmp_path) == {"site": {"title": "Blog"}, "links": ["a", "b"]}

    def test_missing_dir_is_empty(self, tmp_path):
        assert load_global_data(tmp_path / "nope") == {}

    def test_malformed_raises(self, tmp_path):
        (tmp_path / "bad.json").write_text("{")
        with pytest.raises(ParseError, match="bad.json"):
            load_global_data(tmp_path)


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


class TestBuildCollection:
    def _docs(self, make_doc):
        return [
            make_doc("posts/a.md", day=1, tags=["posts"]),
            make_doc("posts/b.md", day=2, tags=["posts", "rust"], draft=True),
            make_doc("about.md", day=3),
            make_doc("posts/c.md", day=4, tags=["posts"]),
        ]

    def test_filters_by_tag_preserving_order(self, make_doc):
        result = build_collection("posts", self._docs(make_doc), is_production=False)
        assert [d.source_path for d in result] == ["posts/a.md", "posts/b.md", "posts/c.md"]

    def test_production_excludes_drafts(self, make_doc):
        result = build_collection("posts", self._docs(make_doc), is_production=True)
        assert [d.source_path for d in result] == ["posts/a.md", "posts/c.md"]

    def test_production_is_subset_and_difference_is_drafts(self, make_doc):
        docs = self._docs(make_doc)
        for tag in ("posts", "rust"):
            dev = build_collection(tag, docs, is_production=False)
            prod = build_collection(tag, docs, is_production=True)
            prod_paths = {d.source_path for d in prod}
            assert prod_paths <= {d.source_path for d in dev}
            assert all(d.draft for d in dev if d.source_path not in prod_paths)

    def test_order_follows_input_not_date(self, make_doc):
        docs = list(reversed(self._docs(make_doc)))
        result = build_collection("posts", docs, is_production=False)
        assert [d.source_path for d in result] == ["posts/c.md", "posts/b.md", "posts/a.md"]

    def test_unknown_tag_is_empty(self, make_doc):
        assert build_collection("nope", self._docs(make_doc), is_production=False) == ()

    def test_no_duplicates(self, make_doc):
        doc = make_doc("posts/a.md", tags=["posts", "posts"])
        assert build_collection("posts", [doc], is_production=False) == (doc,)

    def test_quoted_false_draft_kept_in_production(self, make_doc):
        doc = make_doc("posts/a.md", tags=["posts"], draft="false")
        assert build_collection("posts", [doc], is_production=True) == (doc,)


class TestBuildCollections:
    def test_one_per_tag_plus_all(self, make_doc):
        docs = [
            make_doc("posts/a.md", tags=["posts"]),
            make_doc("notes/n.md", tags=["notes"], draft=True),
            make_doc("hidden.md", permalink=False),
        ]
        dev = build_collections(docs, is_production=False)
        assert set(dev) == {"posts", "notes", "all"}
        assert [d.source_path for d in dev["all"]] == ["posts/a.md", "notes/n.md"]

        prod = build_collections(docs, is_production=True)
        assert prod["notes"] == ()
        assert [d.source_path for d in prod["all"]] == ["posts/a.md"]
