"""Tests for fetch_wiki_data.config module."""

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

import fetch_wiki_data.config as config_module
from fetch_wiki_data.config import (
    CONFIG_DIR,
    DEFAULT_CATEGORIES,
    WikiConfig,
    load_config,
    parse_config,
)
from fetch_wiki_data.models import CategorySpec


class TestParseConfig:
    def test_defaults_for_missing_keys(self) -> None:
        config = parse_config({})

        assert config == WikiConfig()
        assert config.page_size == 500
        assert config.batch_size == 50
        assert config.request_delay == 0.25
        assert config.categories == DEFAULT_CATEGORIES

    def test_categories_become_specs(self) -> None:
        config = parse_config({"categories": [{"title": "علوم", "slug": "Science"}]})
        assert config.categories == (CategorySpec(title="علوم", slug="Science"),)

    def test_prefix_lists_become_tuples(self) -> None:
        config = parse_config({"disallowed_prefixes": ["User:"], "file_prefixes": ["File:"]})
        assert config.disallowed_prefixes == ("User:",)
        assert config.file_prefixes == ("File:",)

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown config keys: bogus"):
            parse_config({"bogus": 1})

    def test_empty_category_table_rejected(self) -> None:
        with pytest.raises(ValueError, match="at least one category"):
            parse_config({"categories": []})

    def test_category_without_slug_rejected(self) -> None:
        with pytest.raises(ValueError, match="title and a slug"):
            parse_config({"categories": [{"title": "علوم"}]})

    def test_duplicate_slug_rejected(self) -> None:
        with pytest.raises(ValueError, match="Duplicate category slug: Science"):
            parse_config({"categories": [{"title": "علوم", "slug": "Science"}, {"title": "علم", "slug": "Science"}]})

    def test_config_is_frozen(self) -> None:
        config = parse_config({})
        with pytest.raises(FrozenInstanceError):
            config.page_size = 10


class TestLoadConfig:
    def test_shipped_prod_config(self) -> None:
        config = load_config("prod", CONFIG_DIR)

        assert len(config.categories) == 13
        assert config.categories[0] == CategorySpec(title="علوم", slug="Science")
        assert config.categories == DEFAULT_CATEGORIES
        assert config.output_dir == "data/wikipedia"

    def test_shipped_configs_live_beside_the_module(self) -> None:
        assert CONFIG_DIR.parent == Path(config_module.__file__).resolve().parent
        assert (CONFIG_DIR / "prod.yaml").is_file()

    def test_default_load_independent_of_working_directory(self, tmp_path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("FETCH_WIKI_CONFIG_ENV", raising=False)

        config = load_config()

        assert len(config.categories) == 13

    def test_empty_env_var_uses_prod(self, monkeypatch) -> None:
        monkeypatch.setenv("FETCH_WIKI_CONFIG_ENV", "")

        assert load_config().categories == DEFAULT_CATEGORIES

    def test_env_var_selects_config(self, tmp_path, monkeypatch) -> None:
        (tmp_path / "dev.yaml").write_text("batch_size: 5\n", encoding="utf-8")
        monkeypatch.setenv("FETCH_WIKI_CONFIG_ENV", "dev")

        assert load_config(config_dir=tmp_path).batch_size == 5

    def test_missing_config_raises(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config("missing", tmp_path)
