"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"

# Conventional variable names honoured alongside BLOGPUB_<FIELD>
ENV_ALIASES: dict[str, tuple[str, ...]] = {
    "gemini_api_key":      ("GEMINI_API_KEY", "API_KEY"),
    "unsplash_access_key": ("UNSPLASH_ACCESS_KEY",),
    "site_url":            ("SITE_URL", "NEXT_PUBLIC_SITE_URL"),
}


class Category(BaseModel):
    """A navigation section and the docs folder that feeds it."""
    key: str
    folder: str


DEFAULT_CATEGORIES = [
    Category(key="blog", folder="blog"),
    Category(key="practice", folder="practice"),
    Category(key="ai", folder="ai"),
]


class Settings(BaseModel):
    app_name:         str = "blogpub"
    site_name:        str = "小菜权"
    site_description: str = "NO BUG, NO CODE"
    site_url:         str = "https://lanlangmozhu.com"
    site_language:    str = "zh-CN"
    author:           str = Field(default="小菜权", description="Default author display name")

    categories:       list[Category] = Field(default_factory=lambda: list(DEFAULT_CATEGORIES))
    default_category: str = "blog"
    reading_speed:    int = Field(default=300, ge=1, description="Characters read per minute")
    read_time_unit:   str = "分钟"

    docs_dir:    str = Field(default="public/docs",             description="Markdown corpus root")
    backup_dir:  str = Field(default="public/docs-backup",      description="Shadow copies written before overwrite")
    posts_list:  str = Field(default="public/posts-list.json",  description="JSON array of relative post paths")
    posts_json:  str = Field(default="public/posts.json",       description="Exported post records")
    rss_path:    str = "public/rss.xml"
    sitemap_path: str = "public/sitemap.xml"
    seo_report:  str = "public/seo-report.json"

    gemini_api_key:  str = ""
    gemini_model:    str = "gemini-2.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    unsplash_access_key: str = ""
    unsplash_base_url:   str = "https://api.unsplash.com"
    image_width:  int = Field(default=1200, ge=1)
    image_height: int = Field(default=600,  ge=1)

    http_timeout:  float = Field(default=30.0, gt=0, description="Seconds per collaborator request")
    request_delay: float = Field(default=1.0,  ge=0, description="Pause between documents in batch runs")
    log_level:     str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    def category_for_folder(self, folder: str) -> str | None:
        """Return the category key mapped to a docs folder, if any."""
        for c in self.categories:
            if c.folder == folder:
                return c.key
        return None


def _env_value(name: str) -> str | None:
    """Return BLOGPUB_<NAME> or the first set alias for the field."""
    if val := os.getenv(f"BLOGPUB_{name.upper()}"):
        return val
    for alias in ENV_ALIASES.get(name, ()):
        if val := os.getenv(alias):
            return val
    return None


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then BLOGPUB_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if name == "categories":
            continue  # structured; only configurable through config.yaml
        if (val := _env_value(name)) is not None:
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
