"""Configuration loader for fetch_wiki_data."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path

from common.config import find_config_path, load_yaml
from fetch_wiki_data.models import CategorySpec

CONFIG_ENV_VAR = "FETCH_WIKI_CONFIG_ENV"
# Shipped as package data next to this module
CONFIG_DIR = Path(__file__).resolve().parent / "configs"

DEFAULT_CATEGORIES: tuple[CategorySpec, ...] = (
    CategorySpec(title="علوم", slug="Science"),
    CategorySpec(title="تكنولوجيا", slug="Technology"),
    CategorySpec(title="ثقافة", slug="Culture"),
    CategorySpec(title="تاريخ", slug="History"),
    CategorySpec(title="جغرافيا", slug="Geography"),
    CategorySpec(title="رياضة", slug="Sports"),
    CategorySpec(title="طب", slug="Medicine"),
    CategorySpec(title="ابتكار", slug="Innovation"),
    CategorySpec(title="صحة_نفسية", slug="MentalHealth"),
    CategorySpec(title="بيئة", slug="Environment"),
    CategorySpec(title="تغذية", slug="Nutrition"),
    CategorySpec(title="سياحة", slug="Tourism"),
    CategorySpec(title="علوم_حياتية", slug="LifeSciences"),
)

# User, user talk, draft, project, template and category namespaces
DEFAULT_DISALLOWED_PREFIXES: tuple[str, ...] = (
    "User:",
    "User talk:",
    "Draft:",
    "Wikipedia:",
    "Template:",
    "Category:",
    "مستخدم:",
    "نقاش المستخدم:",
    "مسودة:",
    "ويكيبيديا:",
    "قالب:",
    "تصنيف:",
)

# Namespace prefixes that mark an image title
DEFAULT_FILE_PREFIXES: tuple[str, ...] = ("File:", "Image:", "ملف:", "صورة:")


@dataclass(frozen=True)
class WikiConfig:
    """Immutable run configuration, built once at startup."""
    site_api_url: str = "https://ar.wikipedia.org/w/api.php"
    rest_base_url: str = "https://ar.wikipedia.org/api/rest_v1"
    article_base_url: str = "https://ar.wikipedia.org/wiki/"
    category_prefix: str = "Category:"
    output_dir: str = "data/wikipedia"
    categories: tuple[CategorySpec, ...] = DEFAULT_CATEGORIES
    disallowed_prefixes: tuple[str, ...] = DEFAULT_DISALLOWED_PREFIXES
    file_prefixes: tuple[str, ...] = DEFAULT_FILE_PREFIXES
    page_size: int = 500
    batch_size: int = 50
    thumbnail_size: int = 800
    request_delay: float = 0.25
    category_delay: float = 0.3
    request_timeout: int = 30
    include_wikitext: bool = True
    image_lookup: bool = True
    description_lines: int = 3
    featured_dated: bool = False
    user_agent: str = "fetch-wiki-data/1.0 (category and daily feed archiver)"


def load_config(config_name: str | None = None, config_dir: Path = CONFIG_DIR) -> WikiConfig:
    """Load configuration from a YAML file.

    Args:
        config_name: Name of config file (without .yaml extension).
                    If None, uses FETCH_WIKI_CONFIG_ENV env var or "prod".
        config_dir: Directory containing config files

    Returns:
        Loaded WikiConfig object

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the category table is empty or malformed
    """
    config_path = find_config_path(config_name, config_dir, env_var=CONFIG_ENV_VAR)
    return parse_config(load_yaml(config_path))


def parse_config(data: dict) -> WikiConfig:
    """Parse a config dictionary into a WikiConfig, keeping defaults for missing keys."""
    known = {f.name for f in fields(WikiConfig)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")

    values = {key: value for key, value in data.items() if key in known}

    if "categories" in values:
        values["categories"] = _parse_categories(values["categories"])
    for key in ("disallowed_prefixes", "file_prefixes"):
        if key in values:
            values[key] = tuple(str(prefix) for prefix in values[key] or ())

    return WikiConfig(**values)


def _parse_categories(raw) -> tuple[CategorySpec, ...]:
    if not raw:
        raise ValueError("Config must contain at least one category")

    categories = []
    slugs = set()
    for item in raw:
        if not isinstance(item, dict) or not item.get("title") or not item.get("slug"):
            raise ValueError(f"Category entries need a title and a slug, got: {item!r}")
        slug = str(item["slug"])
        if slug in slugs:
            raise ValueError(f"Duplicate category slug: {slug}")
        slugs.add(slug)
        categories.append(CategorySpec(title=str(item["title"]), slug=slug))
    return tuple(categories)
