"""Shared utility functions for appgen.

Provides identifier/naming helpers, the namespace-to-path mapping used by
both the resolver and the emitter, blank-line normalisation for rendered
source, and Rich-based console reporting.
"""

from __future__ import annotations

import re
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Name helpers
# ---------------------------------------------------------------------------


def first_upper(value: str) -> str:
    """Upper-case the first character only (``emailAddress`` -> ``EmailAddress``)."""
    return value[:1].upper() + value[1:]


def first_lower(value: str) -> str:
    """Lower-case the first character only (``UserData`` -> ``userData``)."""
    return value[:1].lower() + value[1:]


def to_pascal(value: str) -> str:
    """Convert ``password_reset`` or ``password-reset`` to ``PasswordReset``.

    Already camel-cased input keeps its inner capitals
    (``passwordReset`` -> ``PasswordReset``).
    """
    parts = re.split(r"[-_\s]+", value.strip())
    return "".join(first_upper(part) for part in parts if part)


def to_snake_case(value: str) -> str:
    """Convert ``BlogPost`` or ``blogPost`` to ``blog_post``."""
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", value)
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return re.sub(r"[-\s]+", "_", s2).lower()


def pluralize(word: str) -> str:
    """Naive English plural: ``user`` -> ``users``, ``category`` -> ``categories``."""
    if word.endswith("y") and len(word) > 1 and word[-2].lower() not in "aeiou":
        return word[:-1] + "ies"
    if word.endswith(("s", "sh", "ch", "x", "z")):
        return word + "es"
    return word + "s"


def short_name(fqcn: str) -> str:
    """Return the unqualified class name of ``App\\Model\\User`` (``User``)."""
    return fqcn.strip("\\").rsplit("\\", 1)[-1]


def namespace_of(fqcn: str) -> str:
    """Return the namespace part of a class name, or ``""`` for a global class."""
    stripped = fqcn.strip("\\")
    if "\\" not in stripped:
        return ""
    return stripped.rsplit("\\", 1)[0]


def qualify(namespace: str, name: str) -> str:
    """Join a namespace and a class name."""
    namespace = namespace.strip("\\")
    return f"{namespace}\\{name}" if namespace else name


# ---------------------------------------------------------------------------
# Path mapping
# ---------------------------------------------------------------------------


def class_to_path(fqcn: str, app_dir: Path, extension: str = ".php") -> Path:
    """Map a fully-qualified class name to its source file.

    The first namespace segment stands for *app_dir* itself, so
    ``App\\Model\\User`` maps to ``<app_dir>/Model/User.php``.
    """
    parts = [part for part in fqcn.strip("\\").split("\\") if part]
    if len(parts) > 1:
        parts = parts[1:]
    *directories, name = parts
    return Path(app_dir).joinpath(*directories, f"{name}{extension}")


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

_LEADING_BLANK_LINES = re.compile(r"\A(?:[ \t]*\n)+")
_WHITESPACE_ONLY_LINE = re.compile(r"^[ \t]+$", re.MULTILINE)
_BLANK_RUN = re.compile(r"\n{3,}")


def collapse_blank_lines(content: str) -> str:
    """Normalise rendered source text.

    * Line endings become ``\\n``.
    * Whitespace-only lines become empty lines.
    * Leading blank lines are removed.
    * Any run of blank lines collapses to exactly one.
    * The text ends with exactly one newline.
    """
    text = content.replace("\r\n", "\n").replace("\r", "\n")
    text = _WHITESPACE_ONLY_LINE.sub("", text)
    text = _LEADING_BLANK_LINES.sub("", text)
    text = _BLANK_RUN.sub("\n\n", text)
    text = text.rstrip("\n")
    return text + "\n" if text else ""


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]")
