"""Color support for CLI output using Rich markup."""

import sys

from rich.markup import escape


PRIORITY_STYLES = {
    1: "bold red",
    2: "bold yellow",
    3: "bold blue",
}


def should_use_color(color_flag: bool | None) -> bool:
    """Determine if color should be used based on flag and TTY detection.

    Args:
        color_flag: Explicit color preference (True/False) or None for auto-detect

    Returns:
        True if colors should be used, False otherwise
    """
    if color_flag is None:
        return sys.stdout.isatty()
    return color_flag


def escape_text(text: str, enabled: bool) -> str:
    """Escape markup characters when color output is enabled."""
    if not enabled:
        return text
    return escape(text)


def colorize(text: str, style: str, enabled: bool) -> str:
    """Apply Rich markup style to text if enabled.

    Args:
        text: Text to colorize
        style: Rich style string (e.g., "green", "bold white")
        enabled: Whether coloring is enabled

    Returns:
        Styled text if enabled, original text otherwise
    """
    if not enabled or not style:
        return escape_text(text, enabled)
    return f"[{style}]{escape(text)}[/]"


def bright_white(text: str, enabled: bool) -> str:
    """Apply bright white color to text."""
    return colorize(text, "bold white", enabled)


def dim_white(text: str, enabled: bool) -> str:
    """Apply dim white color to text."""
    return colorize(text, "dim white", enabled)


def magenta(text: str, enabled: bool) -> str:
    """Apply magenta color to text."""
    return colorize(text, "magenta", enabled)


def get_priority_color(priority: int, enabled: bool) -> str:
    """Get style for a task priority marker.

    Args:
        priority: Task priority, 1 (highest) to 4
        enabled: Whether coloring is enabled

    Returns:
        Rich style string for the priority
    """
    if not enabled:
        return ""
    return PRIORITY_STYLES.get(priority, "dim white")
