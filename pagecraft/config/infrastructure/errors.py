"""Errors raised while reading a site config file."""

from pathlib import Path

from pagecraft.core.errors import PagecraftError


class ConfigLoadError(PagecraftError):
    """The file is missing or is not parseable YAML."""

    def __init__(self, path: Path, reason: str = "file not found") -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load config {path}: {reason}")


class MissingEnvVarsError(PagecraftError):
    """One or more ${VAR} references point at unset environment variables.

    ``missing`` maps each variable to the config fields that reference it,
    e.g. ``{"ANTHROPIC_API_KEY": ["ai.api_key"]}``.
    """

    def __init__(self, missing: dict[str, list[str]]) -> None:
        self.missing = missing
        details = "; ".join(
            f"{name} (used by {', '.join(missing[name])})" for name in sorted(missing)
        )
        super().__init__(f"Failed to load config: unset environment variables: {details}")

    @property
    def missing_vars(self) -> list[str]:
        return sorted(self.missing)


class ConfigValidationError(PagecraftError):
    """The config does not describe a valid site.

    ``section`` names the offending top-level key when it is known.
    """

    def __init__(self, reason: str, section: str | None = None) -> None:
        self.section = section
        self.reason = reason
        where = f" [{section}]" if section else ""
        super().__init__(f"Failed to validate config{where}: {reason}")
