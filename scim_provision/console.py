"""Operator-facing output: errors, progress messages and pretty-printed resources."""

import json
from typing import Any, Iterable, Optional, Sequence

import click


class Console:
    """Writes command results to the terminal.

    Errors go to stderr, everything else to stdout.  Click drops the ANSI
    colors when the stream is not a TTY.
    """

    def err(self, message: str) -> None:
        click.secho(f"❌ {message}", fg="red", err=True)

    def info(self, message: str) -> None:
        click.secho(f"✅ {message}", fg="green")

    def pp(self, label: str, value: Any) -> None:
        """Pretty-print a single value as indented JSON under an optional label."""
        if label:
            click.secho(label, bold=True)
        click.echo(json.dumps(value, indent=2, sort_keys=True))

    def ppf(self, label: str, items: Optional[Iterable[Any]], fields: Sequence[str]) -> None:
        """Pretty-print a list of records keeping only ``fields`` from each."""
        rows = [_restrict(item, fields) for item in items or []]
        click.secho(f"{label} ({len(rows)})", bold=True)
        click.echo(json.dumps(rows, indent=2))


def _restrict(item: Any, fields: Sequence[str]) -> Any:
    if not isinstance(item, dict):
        return item
    return {f: item[f] for f in fields if f in item}
