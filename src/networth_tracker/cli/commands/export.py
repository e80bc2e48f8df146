"""Data export commands."""

from datetime import date
from pathlib import Path
from typing import Optional

import typer

from ...core.export import write_csv
from ..common import console, fail, open_store

app = typer.Typer(help="Export data")


@app.command("csv")
def export_csv(
    output: Optional[Path] = typer.Argument(None, help="Output file, default financial-data-<today>.csv"),
):
    """Export assets, liabilities, income and expenses as sectioned CSV."""
    target = output or Path(f"financial-data-{date.today().isoformat()}.csv")
    store = open_store()
    try:
        with open(target, "w", newline="", encoding="utf-8") as f:
            write_csv(store.document, f)
    except OSError as e:
        fail(f"Cannot write {target}: {e}")
    console.print(f"[green]Exported to {target}[/green]")
