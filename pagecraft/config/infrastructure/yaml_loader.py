"""YAML config loader — parses, resolves env vars, validates, and emits observer events."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from pagecraft.config.domain.ai import API_KEY_ENV_VARS, DEFAULT_MODELS
from pagecraft.config.domain.config import SiteConfig
from pagecraft.config.domain.observer import ConfigObserver
from pagecraft.config.infrastructure.env_interpolation import (
    missing_env_references,
    resolve_env_references,
)
from pagecraft.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)
from pagecraft.refinement.domain.config import validate_refinement_config

# Sections that must be mappings when present.
_MAPPING_SECTIONS = ("ai", "judge", "refiner", "refinement", "context")


class YamlConfigLoader:
    """Loads, resolves, validates, and returns a SiteConfig from a YAML file."""

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> SiteConfig:
        """
        Load, resolve, validate, and return a SiteConfig from a YAML file.

        Raises:
            ConfigLoadError: if the file does not exist or is not valid YAML.
            MissingEnvVarsError: if any ${VAR} references are unset (all collected first).
            ConfigValidationError: if a section has the wrong shape or the schema is violated.
            ConfigurationError: if the refinement threshold or iteration cap is out of range.
        """
        raw = _parse_yaml(path=path)
        missing = missing_env_references(raw)
        if missing:
            raise MissingEnvVarsError(missing)
        sections = _check_sections(resolve_env_references(raw))
        resolved = _apply_provider_defaults(sections=sections)
        cfg = _build_config(resolved=resolved)
        validate_refinement_config(config=cfg.refinement)
        if cfg.judge.temperature > 0.0:
            self._observer.config_judge_temperature_warning(cfg.judge.temperature)
        self._observer.config_loaded(
            name=cfg.name, provider=cfg.ai.provider, quality=cfg.ai.quality
        )
        return cfg


def _parse_yaml(path: Path) -> Any:
    if not path.is_file():
        raise ConfigLoadError(path=path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            return yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigLoadError(path=path, reason=f"invalid YAML: {exc}") from exc


def _check_sections(data: Any) -> dict[str, Any]:
    """Return *data* if it is a mapping whose known sections are mappings or empty."""
    if not isinstance(data, dict):
        raise ConfigValidationError("top level must be a mapping")
    for section in _MAPPING_SECTIONS:
        value = data.get(section)
        if value is not None and not isinstance(value, dict):
            raise ConfigValidationError(
                f"must be a mapping, got {type(value).__name__}", section=section
            )
    return data


def _apply_provider_defaults(sections: dict[str, Any]) -> dict[str, Any]:
    """
    Fill in the judge and refiner sections from the ``ai`` section.

    A missing ``model`` falls back to the provider's default model. A missing
    ``api_key`` falls back to ``ai.api_key``, then to the provider's key
    variable (``GOOGLE_API_KEY`` for google). Explicit values always win.

    Raises:
        ConfigValidationError: if the provider is unknown.
    """
    ai_raw: dict[str, Any] = sections.get("ai") or {}
    provider = ai_raw.get("provider", "anthropic")
    if provider not in DEFAULT_MODELS:
        known = ", ".join(sorted(DEFAULT_MODELS))
        raise ConfigValidationError(
            f"unknown provider '{provider}'; must be one of: {known}", section="ai"
        )

    defaults: dict[str, Any] = {"model": DEFAULT_MODELS[provider]}
    api_key = ai_raw.get("api_key") or os.environ.get(API_KEY_ENV_VARS[provider])
    if api_key:
        defaults["api_key"] = api_key

    resolved = dict(sections)
    for section in ("judge", "refiner"):
        resolved[section] = {**defaults, **(sections.get(section) or {})}
    return resolved


def _build_config(resolved: dict[str, Any]) -> SiteConfig:
    try:
        return SiteConfig.model_validate(resolved)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc
