"""Tests for the sitesmith CLI."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from sitesmith.cli import app

runner = CliRunner()


@pytest.fixture
def config_file(site_root: Path, tmp_path: Path) -> Path:
    path = tmp_path / "sitesmith.yaml"
    path.write_text(yaml.dump({
        "content_root": str(site_root),
        "output_root": str(tmp_path / "public"),
        "passthrough": ["css", "CNAME"],
        "worker_count": 2,
        "feed": {"url": "https://example.com/", "title": "Test Blog"},
    }))
    return path


# ── sitesmith build ──────────────────────────────────────────────────


class TestBuildCommand:
    def test_success(self, config_file: Path, tmp_path: Path):
        result = runner.invoke(app, ["-c", str(config_file), "build"])
        assert result.exit_code == 0, result.output
        assert "Build Complete" in result.output
        assert (tmp_path / "public" / "index.html").is_file()
        assert (tmp_path / "public" / "CNAME").is_file()

    def test_production_flag(self, config_file: Path, tmp_path: Path):
        result = runner.invoke(app, ["-c", str(config_file), "build", "--production"])
        assert result.exit_code == 0, result.output
        assert "production" in result.output
        assert "Draft Post" not in (tmp_path / "public" / "index.html").read_text()

    def test_build_env(self, config_file: Path, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("BUILD_ENV", "production")
        result = runner.invoke(app, ["-c", str(config_file), "build"])
        assert result.exit_code == 0, result.output
        assert "Draft Post" not in (tmp_path / "public" / "index.html").read_text()

    def test_development_overrides_env(self, config_file: Path, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("BUILD_ENV", "production")
        result = runner.invoke(app, ["-c", str(config_file), "build", "--development"])
        assert result.exit_code == 0, result.output
        assert "Draft Post" in (tmp_path / "public" / "index.html").read_text()

    def test_dry_run(self, config_file: Path, tmp_path: Path):
        result = runner.invoke(app, ["-c", str(config_file), "build", "--dry-run"])
        assert result.exit_code == 0, result.output
        assert not (tmp_path / "public").exists()

    def test_collision_fails(self, config_file: Path, site_root: Path, tmp_path: Path):
        (site_root / "a.md").write_text("---\npermalink: /dup/\n---\n")
        (site_root / "b.md").write_text("---\npermalink: /dup/\n---\n")
        result = runner.invoke(app, ["-c", str(config_file), "build"])
        assert result.exit_code == 1
        assert "Build failed" in result.output
        assert not (tmp_path / "public").exists()

    def test_render_error_exits_nonzero(self, config_file: Path, site_root: Path, tmp_path: Path):
        (site_root / "bad.md").write_text("---\nlayout: nope.njk\n---\n")
        result = runner.invoke(app, ["-c", str(config_file), "build"])
        assert result.exit_code == 1
        assert (tmp_path / "public" / "index.html").is_file()

    def test_unknown_plugin(self, config_file: Path):
        data = yaml.safe_load(config_file.read_text())
        data["plugins"] = ["sitemap"]
        config_file.write_text(yaml.dump(data))
        result = runner.invoke(app, ["-c", str(config_file), "build"])
        assert result.exit_code == 1
        assert "sitemap" in result.output

    def test_missing_config(self, tmp_path: Path):
        result = runner.invoke(app, ["-c", str(tmp_path / "nope.yaml"), "build"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_workers_must_be_positive(self, config_file: Path):
        result = runner.invoke(app, ["-c", str(config_file), "build", "--workers", "0"])
        assert result.exit_code != 0


# ── Other commands ───────────────────────────────────────────────────


class TestClean:
    def test_removes_output(self, config_file: Path, tmp_path: Path):
        runner.invoke(app, ["-c", str(config_file), "build"])
        result = runner.invoke(app, ["-c", str(config_file), "clean"])
        assert result.exit_code == 0
        assert not (tmp_path / "public").exists()

    def test_nothing_to_remove(self, config_file: Path):
        result = runner.invoke(app, ["-c", str(config_file), "clean"])
        assert result.exit_code == 0
        assert "Nothing to remove" in result.output


class TestFilters:
    def test_lists_builtin_and_plugin_filters(self, config_file: Path):
        result = runner.invoke(app, ["-c", str(config_file), "filters"])
        assert result.exit_code == 0
        assert "readableDate" in result.output
        assert "htmlToAbsoluteUrls" in result.output


class TestHighlightCss:
    def test_stdout(self, config_file: Path):
        result = runner.invoke(app, ["-c", str(config_file), "highlight-css"])
        assert result.exit_code == 0
        assert ".highlight" in result.output

    def test_to_file(self, config_file: Path, tmp_path: Path):
        target = tmp_path / "syntax.css"
        result = runner.invoke(
            app, ["-c", str(config_file), "highlight-css", "--style", "monokai", "-o", str(target)]
        )
        assert result.exit_code == 0
        assert ".highlight" in target.read_text()


class TestConfigCommands:
    def test_init_then_refuse(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 0
        assert (tmp_path / "sitesmith.yaml").is_file()

        result = runner.invoke(app, ["config", "init"])
        assert result.exit_code == 1
        assert "already exists" in result.output

        result = runner.invoke(app, ["config", "init", "--force"])
        assert result.exit_code == 0

    def test_show(self, config_file: Path):
        result = runner.invoke(app, ["-c", str(config_file), "config", "show"])
        assert result.exit_code == 0
        assert "worker_count" in result.output
