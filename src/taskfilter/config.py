"""Configuration handling for the taskfilter CLI."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeGuard, cast

import typer

from taskfilter.logging_config import LOGGER_NAME


DEFAULT_CONFIG_NAME = ".taskfilter.json"

COMMAND_OPTION_NAMES = {
    "color_flag",
    "data",
    "max_results",
    "now",
    "offset",
    "out",
    "verbose",
}

INT_OPTIONS: dict[str, tuple[str, int | None]] = {
    "--max-results": ("max_results", 0),
    "--offset": ("offset", 0),
}

STR_OPTIONS: dict[str, str] = {
    "--data": "data",
    "--now": "now",
    "--out": "out",
}

BOOL_OPTIONS: dict[str, str] = {
    "--verbose": "verbose",
}

DEST_TO_OPTION_NAME: dict[str, str] = {
    "color_flag": "--color/--no-color",
    "data": "--data",
    "max_results": "--max-results",
    "now": "--now",
    "offset": "--offset",
    "out": "--out",
    "verbose": "--verbose",
}


CONFIG_DEFAULTS: dict[str, object] = {}
CONFIG_CUSTOM_FILTERS: dict[str, str] = {}


logger = logging.getLogger(LOGGER_NAME)


@dataclass
class LoadedCliConfig:
    """Fully parsed CLI config payload."""

    defaults: dict[str, object] = field(default_factory=dict)
    custom_filters: dict[str, str] = field(default_factory=dict)


def load_config(filepath: str) -> tuple[dict[str, object], bool]:
    """Load config from JSON file.

    Args:
        filepath: Path to config file

    Returns:
        Tuple of (config dict, malformed flag)
    """
    try:
        with open(filepath, encoding="utf-8") as f:
            config = json.load(f)
    except FileNotFoundError:
        return ({}, False)
    except OSError:
        return ({}, True)
    except json.JSONDecodeError:
        return ({}, True)

    if not isinstance(config, dict):
        return ({}, True)

    return (config, False)


def is_string_dict(value: object) -> TypeGuard[dict[str, str]]:
    """Check if value is dict[str, str]."""
    return isinstance(value, dict) and all(
        isinstance(key, str) and isinstance(item, str) for key, item in value.items()
    )


def parse_color_defaults(config: dict[str, object]) -> tuple[dict[str, object], bool]:
    """Parse color-related config defaults."""
    defaults: dict[str, object] = {}
    color_value = config.get("--color")
    no_color_value = config.get("--no-color")

    if "--color" in config and not isinstance(color_value, bool):
        return ({}, False)
    if "--no-color" in config and not isinstance(no_color_value, bool):
        return ({}, False)
    if color_value is True and no_color_value is True:
        return ({}, False)

    if color_value is True:
        defaults["color_flag"] = True
    if no_color_value is True:
        defaults["color_flag"] = False

    return (defaults, True)


def validate_int_option(value: object, min_value: int | None) -> int | None:
    """Validate integer option value."""
    if not isinstance(value, int) or isinstance(value, bool):
        return None
    if min_value is not None and value < min_value:
        return None
    return value


def parse_config_sections(
    raw_config: dict[str, object],
) -> tuple[dict[str, object], dict[str, str]] | None:
    """Parse top-level config sections.

    Accepted shape:
      {
        "defaults": {"--data": "export.json", "--max-results": 20},
        "filter": {"name": "query"}
      }
    """
    allowed_keys = {"defaults", "filter"}
    if any(key not in allowed_keys for key in raw_config):
        return None

    defaults_section = raw_config.get("defaults", {})
    if not isinstance(defaults_section, dict):
        return None

    filter_section = raw_config.get("filter", {})
    if not is_string_dict(filter_section):
        return None

    return (cast(dict[str, object], defaults_section), dict(filter_section))


def build_config_defaults(config: dict[str, object]) -> dict[str, object] | None:
    """Validate the defaults section and map option names to parameter names.

    Returns:
        Defaults keyed by parameter name, or None if any entry is invalid
    """
    defaults, color_valid = parse_color_defaults(config)
    if not color_valid:
        return None

    for key, value in config.items():
        if key in {"--color", "--no-color"}:
            continue
        if key in INT_OPTIONS:
            dest, min_value = INT_OPTIONS[key]
            int_value = validate_int_option(value, min_value)
            if int_value is None:
                return None
            defaults[dest] = int_value
        elif key in STR_OPTIONS:
            if not isinstance(value, str) or not value.strip():
                return None
            defaults[STR_OPTIONS[key]] = value
        elif key in BOOL_OPTIONS:
            if not isinstance(value, bool):
                return None
            defaults[BOOL_OPTIONS[key]] = value
        else:
            return None

    return defaults


def parse_config_argument(argv: list[str]) -> str:
    """Parse only the --config argument from argv."""
    for idx, arg in enumerate(argv[1:], start=1):
        if arg == "--config" and idx + 1 < len(argv):
            return argv[idx + 1]
        if arg.startswith("--config="):
            return arg.split("=", 1)[1]
    return DEFAULT_CONFIG_NAME


def load_cli_config(argv: list[str]) -> LoadedCliConfig:
    """Load config defaults from the configured file path."""
    config_name = parse_config_argument(argv)
    config_path = Path(config_name)
    if not config_path.is_absolute():
        config_path = Path.cwd() / config_name
    config, load_error = load_config(str(config_path))

    if load_error:
        raise typer.BadParameter("Malformed config")

    config_sections = parse_config_sections(config)
    if config_sections is None:
        raise typer.BadParameter("Malformed config")

    defaults_config, custom_filters = config_sections
    defaults = build_config_defaults(defaults_config)
    if defaults is None:
        raise typer.BadParameter("Malformed config")

    return LoadedCliConfig(
        defaults={key: value for key, value in defaults.items() if key in COMMAND_OPTION_NAMES},
        custom_filters=custom_filters,
    )


def build_default_map(defaults: dict[str, object]) -> dict[str, object]:
    """Build Click default_map for Typer commands."""
    command_defaults = {key: value for key, value in defaults.items() if key != "verbose"}
    list_defaults = {key: value for key, value in command_defaults.items() if key == "data"}
    return {
        "eval": dict(command_defaults),
        "filters": {
            "list": list_defaults,
            "run": dict(command_defaults),
        },
    }


def _format_argument_log_entry(arg_name: str, value: object) -> str:
    """Format one argument/value pair for command argument logging."""
    return f"{arg_name}={value!r}"


def log_applied_config_defaults(command_name: str) -> None:
    """Log config defaults loaded from config file."""
    if not logger.isEnabledFor(logging.INFO):
        return

    entries = [
        f"{DEST_TO_OPTION_NAME[dest]}={value!r}"
        for dest, value in sorted(CONFIG_DEFAULTS.items(), key=lambda item: item[0])
        if dest in DEST_TO_OPTION_NAME
    ]
    if CONFIG_CUSTOM_FILTERS:
        entries.append(f"filter={sorted(CONFIG_CUSTOM_FILTERS)!r}")
    if entries:
        logger.info("Config defaults (%s): %s", command_name, ", ".join(entries))


def log_command_arguments(args: object, command_name: str) -> None:
    """Log all final argument values used to run a command."""
    if not logger.isEnabledFor(logging.INFO):
        return

    try:
        arg_items = vars(args).items()
    except TypeError:
        return

    entries = [
        _format_argument_log_entry(arg_name, arg_value)
        for arg_name, arg_value in sorted(arg_items, key=lambda item: item[0])
    ]
    logger.info("Command arguments (%s): %s", command_name, ", ".join(entries))
