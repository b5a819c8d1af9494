"""Configuration management for expense-search."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w

from expense_search.constants import DEFAULT_CURRENCY, DEFAULT_STATUS, DEFAULT_TYPE, STATUSES_BY_TYPE
from expense_search.exceptions import (
    ConfigParseError,
    ConfigValidationError,
)
from expense_search.utils.messages import MESSAGES


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".config" / "expense-search" / "config.toml"


@dataclass
class Config:
    """Application configuration.

    Attributes:
        colored_output: Whether to use colored terminal output.
        locale: Message catalog for synthesized names (``en``, ``es``).
        default_type: Search type used when a command gets no query.
        default_status: Search status used when a command gets no query.
        default_policy_id: Policy scoping queries built by ``build``.
        default_currency: Currency for amounts whose record carries none.
        config_path: Path where config was loaded from (None if defaults).
    """

    colored_output: bool = True
    locale: str = "en"
    default_type: str = DEFAULT_TYPE
    default_status: str = DEFAULT_STATUS
    default_policy_id: str | None = None
    default_currency: str = DEFAULT_CURRENCY
    config_path: Path | None = None

    def validate(self) -> list[str]:
        """Validate configuration values.

        Returns:
            List of warning messages for non-fatal issues.

        Raises:
            ConfigValidationError: If a critical validation fails.
        """
        warnings: list[str] = []

        if self.default_type not in STATUSES_BY_TYPE:
            raise ConfigValidationError(
                "search.default_type",
                self.default_type,
                f"must be one of {', '.join(STATUSES_BY_TYPE)}",
            )

        if self.default_status not in STATUSES_BY_TYPE[self.default_type]:
            warnings.append(
                f"search.default_status={self.default_status} is not a status of "
                f"type {self.default_type}, using {DEFAULT_STATUS}"
            )
            self.default_status = DEFAULT_STATUS

        if self.locale not in MESSAGES:
            warnings.append(f"No messages for locale {self.locale}, using English")

        self.default_currency = self.default_currency.upper()
        if len(self.default_currency) != 3:
            warnings.append(
                f"formatting.default_currency={self.default_currency} "
                f"is not a 3-letter currency code"
            )

        return warnings


def load_config(config_path: Path | None = None) -> tuple[Config, list[str]]:
    """Load configuration from file or use defaults.

    Args:
        config_path: Explicit config file path. If None, uses default location.

    Returns:
        Tuple of (Config object, list of warning messages).

    Raises:
        ConfigParseError: If config file exists but has invalid syntax.
        ConfigValidationError: If config values are invalid.
    """
    warnings: list[str] = []

    if config_path is None:
        config_path = get_default_config_path()

    config_path = config_path.expanduser().resolve()

    if not config_path.exists():
        config = Config()
        warnings.append(
            f"No config file found at {config_path}. Using defaults. "
            f"Create config with: expense-search init-config"
        )
        config_warnings = config.validate()
        return config, warnings + config_warnings

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(config_path, str(e)) from e

    config = _parse_config_dict(data, config_path)
    config_warnings = config.validate()

    return config, warnings + config_warnings


def _require_str(section: dict[str, Any], key: str, name: str, *, nullable: bool = False) -> Any:
    value = section[key]
    if value is None and nullable:
        return None
    if not isinstance(value, str):
        reason = "must be a string or null" if nullable else "must be a string"
        raise ConfigValidationError(name, value, reason)
    return value


def _parse_config_dict(data: dict[str, Any], config_path: Path) -> Config:
    """Parse configuration dictionary into Config object."""
    config = Config(config_path=config_path)

    # Parse [display] section
    display = data.get("display", {})
    if "colored_output" in display:
        value = display["colored_output"]
        if not isinstance(value, bool):
            raise ConfigValidationError("display.colored_output", value, "must be a boolean")
        config.colored_output = value

    if "locale" in display:
        config.locale = _require_str(display, "locale", "display.locale")

    # Parse [search] section
    search = data.get("search", {})
    if "default_type" in search:
        config.default_type = _require_str(search, "default_type", "search.default_type")

    if "default_status" in search:
        config.default_status = _require_str(search, "default_status", "search.default_status")

    if "default_policy_id" in search:
        config.default_policy_id = _require_str(
            search, "default_policy_id", "search.default_policy_id", nullable=True
        )

    # Parse [formatting] section
    formatting = data.get("formatting", {})
    if "default_currency" in formatting:
        config.default_currency = _require_str(
            formatting, "default_currency", "formatting.default_currency"
        )

    return config


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Path to save to. If None, uses config.config_path or default.
    """
    if config_path is None:
        config_path = config.config_path or get_default_config_path()

    config_path = config_path.expanduser().resolve()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data: dict[str, Any] = {
        "display": {
            "colored_output": config.colored_output,
            "locale": config.locale,
        },
        "search": {
            "default_type": config.default_type,
            "default_status": config.default_status,
        },
        "formatting": {
            "default_currency": config.default_currency,
        },
    }

    if config.default_policy_id is not None:
        data["search"]["default_policy_id"] = config.default_policy_id

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
