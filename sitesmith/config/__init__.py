from .loader import BUILD_ENV_VAR, is_production_env, load_config
from .models import (
    FeedConfig,
    HighlightConfig,
    MarkdownConfig,
    PassthroughEntry,
    SiteConfig,
)

__all__ = [
    "BUILD_ENV_VAR",
    "FeedConfig",
    "HighlightConfig",
    "MarkdownConfig",
    "PassthroughEntry",
    "SiteConfig",
    "is_production_env",
    "load_config",
]
