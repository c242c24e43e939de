"""
Configuration loader for the prototype cache.

This module centralizes reading and validating cache settings from
`config/cache.yml`. Environment variables (optionally from a `.env` file)
override individual values so deployments can tune limits without editing
the file.

Environment Variables:
    PROTOTYPE_CACHE_TTL_MS: Snapshot TTL in milliseconds
    PROTOTYPE_CACHE_MAX_DATA_SIZE_BYTES: Store size ceiling in bytes
    PROTOTYPE_CACHE_FETCH_LIMIT: Default number of records per fetch
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .store import DEFAULT_DATA_SIZE_BYTES, DEFAULT_TTL_MS, MAX_DATA_SIZE_BYTES
from .store.errors import ConfigurationError
from .types import FetchParams, merge_fetch_params

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

ENV_TTL_MS = "PROTOTYPE_CACHE_TTL_MS"
ENV_MAX_DATA_SIZE_BYTES = "PROTOTYPE_CACHE_MAX_DATA_SIZE_BYTES"
ENV_FETCH_LIMIT = "PROTOTYPE_CACHE_FETCH_LIMIT"


@dataclass
class StoreConfig:
    """Limits for the in-memory store."""

    ttl_ms: int = DEFAULT_TTL_MS
    max_data_size_bytes: int = DEFAULT_DATA_SIZE_BYTES

    def validate(self) -> None:
        """Reject values the store would refuse, before any store exists."""
        if self.ttl_ms < 0:
            raise ConfigurationError(f"ttl_ms must not be negative, got {self.ttl_ms}")
        if not 0 < self.max_data_size_bytes <= MAX_DATA_SIZE_BYTES:
            raise ConfigurationError(
                f"max_data_size_bytes must be between 1 and {MAX_DATA_SIZE_BYTES}, "
                f"got {self.max_data_size_bytes}"
            )


@dataclass
class CacheConfig:
    """Complete cache configuration."""

    store: StoreConfig = field(default_factory=StoreConfig)
    fetch: FetchParams = field(default_factory=merge_fetch_params)

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> "CacheConfig":
        """Create CacheConfig from a parsed YAML mapping."""
        store_section = config_dict.get("store") or {}
        if not isinstance(store_section, Mapping):
            raise ValueError("`store` section in cache configuration must be a mapping")

        fetch_section = config_dict.get("fetch") or {}
        if not isinstance(fetch_section, Mapping):
            raise ValueError("`fetch` section in cache configuration must be a mapping")

        store = StoreConfig(
            ttl_ms=_as_int(store_section.get("ttl_ms", DEFAULT_TTL_MS), "store.ttl_ms"),
            max_data_size_bytes=_as_int(
                store_section.get("max_data_size_bytes", DEFAULT_DATA_SIZE_BYTES),
                "store.max_data_size_bytes",
            ),
        )

        fetch: FetchParams = {}
        for key in ("offset", "limit", "record_id"):
            if fetch_section.get(key) is not None:
                fetch[key] = _as_int(fetch_section[key], f"fetch.{key}")

        return cls(store=store, fetch=merge_fetch_params(fetch))


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"`{name}` must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"`{name}` must be an integer, got {value!r}") from exc


def _project_root() -> Path:
    """Return the project root path based on this file's location."""
    return Path(__file__).resolve().parent.parent


def default_config_path() -> Path:
    return _project_root() / "config" / "cache.yml"


def _apply_env_overrides(config: CacheConfig) -> CacheConfig:
    overrides = {}

    ttl_ms = os.getenv(ENV_TTL_MS)
    if ttl_ms:
        config.store.ttl_ms = _as_int(ttl_ms, ENV_TTL_MS)
        overrides[ENV_TTL_MS] = config.store.ttl_ms

    max_size = os.getenv(ENV_MAX_DATA_SIZE_BYTES)
    if max_size:
        config.store.max_data_size_bytes = _as_int(max_size, ENV_MAX_DATA_SIZE_BYTES)
        overrides[ENV_MAX_DATA_SIZE_BYTES] = config.store.max_data_size_bytes

    fetch_limit = os.getenv(ENV_FETCH_LIMIT)
    if fetch_limit:
        config.fetch["limit"] = _as_int(fetch_limit, ENV_FETCH_LIMIT)
        overrides[ENV_FETCH_LIMIT] = config.fetch["limit"]

    if overrides:
        logger.info("Applied cache configuration overrides from environment", extra={"overrides": overrides})
    return config


def load_cache_config(config_path: str | None = None) -> CacheConfig:
    """
    Load cache configuration from YAML file plus environment overrides.

    Args:
        config_path: Optional override for the config file path. When omitted,
            the function reads `config/cache.yml` relative to the project root;
            if that file is absent (e.g. after a non-editable install) the
            built-in defaults are used. Installed deployments that need a
            file should pass its path explicitly.

    Returns:
        Validated `CacheConfig`.

    Raises:
        FileNotFoundError: If an explicitly given `config_path` does not exist.
        ValueError: If the YAML file cannot be parsed or has invalid structure.
        ConfigurationError: If a store limit is out of range.
    """
    path = Path(config_path) if config_path else default_config_path()
    raw_config: Mapping[str, Any] | None
    if path.exists():
        try:
            with path.open("r", encoding="utf-8") as handle:
                raw_config = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            logger.error("Failed to parse cache configuration: %s", exc)
            raise ValueError(f"Invalid YAML in cache configuration: {exc}") from exc
    elif config_path:
        logger.error("Cache configuration file not found: %s", path)
        raise FileNotFoundError(f"Cache configuration file not found: {path}")
    else:
        logger.warning("Bundled cache configuration not found, using defaults: %s", path)
        raw_config = {}

    if raw_config is None:
        logger.warning("Cache configuration file is empty, using defaults: %s", path)
        raw_config = {}

    if not isinstance(raw_config, Mapping):
        raise ValueError("Cache configuration must be a mapping at the top level")

    config = _apply_env_overrides(CacheConfig.from_dict(raw_config))
    config.store.validate()

    logger.info(
        "Loaded cache configuration",
        extra={
            "ttl_ms": config.store.ttl_ms,
            "max_data_size_bytes": config.store.max_data_size_bytes,
            "fetch_params": dict(config.fetch),
        },
    )
    return config


__all__ = ["CacheConfig", "StoreConfig", "load_cache_config"]
