"""Shared utilities: console output, prompts and file logging.

Used by the CLI; handlers and services log through ``logging`` only.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm

# ---------------------------------------------------------------------------
# Console singleton
# ---------------------------------------------------------------------------
console = Console()

# ---------------------------------------------------------------------------
# Timestamp for log file naming
# ---------------------------------------------------------------------------
TIMESTAMP = datetime.now().strftime("%Y-%m-%d-%H%M%S")

# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------


def print_header(title: str) -> None:
    console.print()
    console.print(Panel(f"[bold]{title}[/bold]", border_style="blue", expand=True))
    console.print()


def print_step(msg: str) -> None:
    console.print(f"[bold cyan]▶ {msg}[/bold cyan]")


def print_info(msg: str) -> None:
    console.print(f"[blue]ℹ {msg}[/blue]")


def print_success(msg: str) -> None:
    console.print(f"[bold green]✔ {msg}[/bold green]")


def print_warning(msg: str) -> None:
    console.print(f"[bold yellow]⚠ {msg}[/bold yellow]")


def print_error(msg: str) -> None:
    console.print(f"[bold red]✖ {msg}[/bold red]")


def print_detail(msg: str) -> None:
    console.print(f"  {msg}")


def die(msg: str, code: int = 1) -> None:
    print_error(msg)
    sys.exit(code)


def confirm(msg: str, default: bool = False) -> bool:
    return Confirm.ask(f"[bold]{msg}[/bold]", default=default)


# ---------------------------------------------------------------------------
# File-based logging
# ---------------------------------------------------------------------------

_log_file: Optional[Path] = None


def init_logging(prefix: str = "iotform", log_dir: Optional[Path] = None, debug: bool = False) -> Path:
    """Attach a file handler to the ``iotform`` logger once. Returns the log file path."""
    global _log_file

    if _log_file is not None:
        return _log_file

    if log_dir is None:
        from .config import settings
        log_dir = settings.log_dir

    log_dir.mkdir(parents=True, exist_ok=True)
    _log_file = log_dir / f"{prefix}-{TIMESTAMP}.log"

    logger = logging.getLogger("iotform")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    fh = logging.FileHandler(_log_file)
    fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(fh)
    return _log_file


def get_log_file() -> Optional[Path]:
    return _log_file
