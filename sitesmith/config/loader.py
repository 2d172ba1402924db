"""Find and validate sitesmith.yaml, expanding ${VAR} references."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from sitesmith.errors import ConfigError

from .models import SiteConfig

BUILD_ENV_VAR = "BUILD_ENV"


def load_config(cli_path: str | None = None) -> SiteConfig:
    """Load config with resolution order: CLI > project-local > defaults."""
    if cli_path and not Path(cli_path).exists():
        raise ConfigError(f"Config file not found: {cli_path}")

    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./sitesmith.yaml"),
    ]

    for path in config_paths:
        if path and path.exists():
            try:
                with open(path) as f:
                    raw = yaml.safe_load(f)
                if raw is None:
                    continue
                if not isinstance(raw, dict):
                    raise ConfigError(f"Invalid config in {path}: expected a mapping")
                raw = _expand_env_vars(raw)
                return SiteConfig(**raw)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {path}: {e}") from e
            except ValidationError as e:
                raise ConfigError(f"Invalid config in {path}: {e}") from e

    return SiteConfig()


def is_production_env(environ: dict[str, str] | None = None) -> bool:
    """Read the production flag from BUILD_ENV. Only the exact value 'production' counts."""
    env = os.environ if environ is None else environ
    return env.get(BUILD_ENV_VAR) == "production"


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `sitesmith config init`
DEFAULT_CONFIG_TEMPLATE = """\
# sitesmith.yaml

# Directories (relative to the working directory)
content_root: "."
output_root: "_site"
includes_dir: "_includes"      # relative to content_root
data_dir: "_data"              # relative to content_root

# Files processed as templates
template_formats: [md, njk, html, liquid]
markdown_template_engine: "jinja"   # jinja | none
html_template_engine: "jinja"       # jinja | none

# Copied verbatim into the output
passthrough:
  - CNAME
  - img
  - css
  # - src: "posts/2025-06-06-record-shredding-part-1/img"

# worker_count: 4              # default: number of CPUs
path_prefix: "/"

site:
  title: "My Blog"
  url: "https://example.com/"

markdown:
  html: true
  breaks: false
  linkify: true
  anchor_levels: [1, 2, 3, 4]
  anchor_symbol: "#"
  anchor_class: "direct-link"

highlight:
  enabled: true
  style: "default"             # any Pygments style

# Post-processing stages, run in order
plugins: [navigation, feed]

feed:
  path: "feed.xml"
  collection: "posts"
  title: "My Blog"
  url: "https://example.com/"
  author_name: "${USER}"
  limit: 10

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
