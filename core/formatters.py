# core/formatters.py

# all pure text utilities
# must never import from models!

import re

# === generic text formatters ===


def format_banner_text(title: str, width: int = 40) -> str:
    line = "=" * width
    centered_title = f"{title:^{width}}"

    return f"{line}\n{centered_title}\n{line}"


def format_count(count: int, singular: str, plural: str | None = None) -> str:
    noun = singular if count == 1 else (plural or f"{singular}s")

    return f"{count} {noun}"


def remove_extra_space(text: str) -> str:
    """Collapses runs of whitespace into single spaces and strips both ends."""
    return re.sub(r"\s+", " ", text).strip()


# === csv formatters ===


def sanitize_for_csv(value: str) -> str:
    """
    Makes a value safe to use as one CSV cell.

    The value is wrapped in double quotes and any embedded double quote is doubled,
    so commas, quotes, and line breaks inside the value stay within the cell.
    """
    escaped = value.replace('"', '""')

    return f'"{escaped}"'


def format_csv_row(cells: list[str]) -> str:
    return ",".join(cells)
