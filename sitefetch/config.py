# === FILE: sitefetch/config.py ===
"""
Crawl configuration: schema, validation and loading from YAML/JSON files.
Pydantic describes the schema; every validation problem surfaces as
:class:`~sitefetch.errors.ConfigError` before a single request is sent.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import soupsieve
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sitefetch import __version__
from sitefetch.errors import ConfigError

DEFAULT_CONCURRENCY = 3
DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = f"sitefetch/{__version__}"


class CrawlConfig(BaseModel):
    """Options of one crawl. Immutable once the crawl starts."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    concurrency: int = Field(DEFAULT_CONCURRENCY, ge=1, description="Number of concurrent fetches.")
    match: Tuple[str, ...] = Field(default=(), description="Glob patterns a page URL must match.")
    content_selector: Optional[str] = Field(None, description="CSS selector of the page content.")
    limit: Optional[int] = Field(None, ge=1, description="Maximum number of recorded pages.")
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0, description="Timeout of a single fetch (seconds).")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent header.")

    @field_validator("match", mode="before")
    def _coerce_match(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, str):
            return (v,)
        return v

    @field_validator("match")
    def _drop_blank_patterns(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(p.strip() for p in v if p.strip())

    @field_validator("content_selector")
    def _check_selector(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        v = v.strip()
        try:
            soupsieve.compile(v)
        except soupsieve.SelectorSyntaxError as exc:
            raise ValueError(f"invalid CSS selector {v!r}: {exc}") from exc
        return v


def build_config(config: Optional[CrawlConfig] = None, **options: Any) -> CrawlConfig:
    """
    Merge *options* over *config* (or over the defaults) and validate.

    Options whose value is None are ignored, so CLI flags that were not
    given do not clobber values loaded from a file.
    """
    data: Dict[str, Any] = config.model_dump() if config is not None else {}
    data.update({k: v for k, v in options.items() if v is not None})
    try:
        return CrawlConfig(**data)
    except ValidationError as exc:
        raise ConfigError(_describe(exc)) from exc


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err["loc"]) or "config"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Top level of {path} must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Top level of {path} must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> CrawlConfig:
    """
    Read a YAML or JSON file and return the validated CrawlConfig.
    Keys may use dashes (``content-selector``) or underscores.
    With *path* None the defaults are returned.
    """
    if path is None:
        return CrawlConfig()
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ConfigError(f"Unsupported config format: {suffix}")

    return build_config(**{str(k).replace("-", "_"): v for k, v in data.items()})


__all__ = ["CrawlConfig", "build_config", "load_config", "DEFAULT_USER_AGENT"]
