# iotform CLI: main entry point
"""iotform CLI: manage AWS IoT Analytics and Greengrass resources from the terminal."""

from __future__ import annotations

import json
from contextlib import contextmanager

import click

from ..common import (
    confirm,
    console,
    die,
    get_log_file,
    init_logging,
    print_detail,
    print_header,
    print_info,
    print_step,
    print_success,
    print_warning,
)
from ..config import settings


@contextmanager
def _open_manager():
    """Yield a ResourceManager bound to a fresh state-store session."""
    from ..db import SessionLocal, init_db
    from ..providers.aws.clients import AWSClients
    from ..services.state import ResourceManager

    init_logging(debug=settings.debug)
    init_db()
    db = SessionLocal()
    try:
        yield ResourceManager(db, AWSClients.from_settings(settings))
    finally:
        db.close()


def _fail(address: str, error: Exception) -> None:
    log_file = get_log_file()
    if log_file:
        print_info(f"Log: {log_file}")
    die(f"{address}: {error}")


@click.group()
@click.version_option(version=settings.app_version, prog_name="iotform")
def cli():
    """iotform: declarative AWS IoT Analytics and Greengrass resources."""
    pass


@cli.command()
def types():
    """List supported resource types."""
    from ..services.registry import registry

    for resource_type in registry.supported_types:
        click.echo(resource_type)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def apply(file: str):
    """Create or update every resource declared in FILE."""
    with open(file) as f:
        try:
            document = json.load(f)
        except json.JSONDecodeError as e:
            die(f"{file} is not valid JSON: {e}")

    resources = document.get("resources") if isinstance(document, dict) else None
    if not isinstance(resources, dict):
        die(f"{file} must contain a 'resources' object keyed by <type>.<name>")

    print_header(f"Applying {len(resources)} resource(s)")
    with _open_manager() as manager:
        for address, attributes in resources.items():
            print_step(address)
            try:
                state = manager.apply(address, attributes)
            except Exception as e:
                _fail(address, e)
            print_success(f"{address} ({state.remote_id})")


@cli.command()
@click.argument("address", required=False)
def show(address: str | None):
    """Show stored state for all resources, or the attributes of ADDRESS."""
    from rich.table import Table

    with _open_manager() as manager:
        if address:
            state = manager.get(address)
            if state is None:
                die(f"{address} is not managed")
            print_header(address)
            print_detail(f"Remote ID: {state.remote_id}")
            if state.tainted:
                print_warning("Tainted: created remotely but not fully applied")
            print_detail(f"Last read: {state.last_read_at or '-'}")
            console.print_json(json.dumps(state.attributes, default=str))
            return

        items = manager.list_states()
        if not items:
            print_info("No resources managed.")
            return
        table = Table(title="Resources")
        table.add_column("Address", style="cyan")
        table.add_column("Type")
        table.add_column("Remote ID")
        table.add_column("Last read")
        for s in items:
            table.add_row(
                s.address, s.resource_type,
                f"{s.remote_id} [yellow](tainted)[/yellow]" if s.tainted else s.remote_id,
                s.last_read_at.strftime("%Y-%m-%d %H:%M:%S") if s.last_read_at else "-",
            )
        console.print(table)


@cli.command()
@click.argument("address", required=False)
def refresh(address: str | None):
    """Re-read resources from AWS and forget those that no longer exist."""
    with _open_manager() as manager:
        before = {s.address for s in manager.list_states()} if address is None else {address}
        try:
            remaining = manager.refresh(address)
        except Exception as e:
            _fail(address or "refresh", e)

        kept = {s.address for s in remaining}
        for gone in sorted(before - kept):
            print_warning(f"{gone} no longer exists, removed from state")
        for s in remaining:
            print_success(f"{s.address} refreshed")


@cli.command()
@click.argument("address")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
def destroy(address: str, yes: bool):
    """Delete the resource at ADDRESS and forget it."""
    if not yes and not confirm(f"Destroy {address}?"):
        print_info("Aborted.")
        return

    with _open_manager() as manager:
        try:
            manager.destroy(address)
        except Exception as e:
            _fail(address, e)
        print_success(f"{address} destroyed")


@cli.command("import")
@click.argument("address")
@click.argument("resource_id")
def import_cmd(address: str, resource_id: str):
    """Adopt the existing remote resource RESOURCE_ID as ADDRESS."""
    with _open_manager() as manager:
        try:
            state = manager.import_resource(address, resource_id)
        except Exception as e:
            _fail(address, e)
        print_success(f"{address} imported ({state.remote_id})")


@cli.command()
@click.option("--limit", default=20, show_default=True, help="Number of entries to show")
def history(limit: int):
    """Show recent actions from the audit log."""
    from rich.table import Table

    with _open_manager() as manager:
        entries = manager.history(limit)
        if not entries:
            print_info("No actions recorded.")
            return
        table = Table(title="History")
        table.add_column("When")
        table.add_column("Address", style="cyan")
        table.add_column("Action")
        table.add_column("Status")
        table.add_column("Details")
        for entry in entries:
            status_style = "green" if entry.status == "success" else "red"
            table.add_row(
                entry.created_at.strftime("%Y-%m-%d %H:%M:%S"),
                entry.address,
                entry.action_type,
                f"[{status_style}]{entry.status}[/{status_style}]",
                entry.details.get("error") or entry.details.get("id") or "",
            )
        console.print(table)


if __name__ == "__main__":
    cli()
