"""cmsync CLI — plan, apply and import content model declarations."""

import logging

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from cmsync import __version__
from cmsync.config import Config, load_config
from cmsync.diagnostics import Severity, translate_error
from cmsync.errors import CMSyncError

console = Console()


def _print_diagnostics(err: BaseException) -> None:
    for d in translate_error(err):
        if d.severity == Severity.WARNING:
            console.print(f"  [yellow]![/] {d.summary}")
        else:
            console.print(f"  [red]x[/] {d.summary}")


def _load_models(path: str):
    from cmsync.declarations import load_declarations

    try:
        return load_declarations(path)
    except (OSError, yaml.YAMLError, CMSyncError, KeyError) as e:
        console.print(f"  [red]Failed to load declarations:[/] {path}")
        _print_diagnostics(e)
        raise SystemExit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", default=None, help="YAML configuration file")
@click.option("--store-dir", default=None, help="Directory of the remote copy")
@click.option("--space", default=None, help="Space id")
@click.option("--environment", "-e", default=None, help="Environment id")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output")
@click.pass_context
def main(ctx, config_path, store_dir, space, environment, verbose):
    """cmsync — reconcile declared content models with their remote copy.

    Reads desired state from a YAML declaration file, compares it with the
    remote content types and editor interfaces, and writes only what drifted.
    """
    config = load_config(config_path) if config_path else Config()
    config = Config.from_env(config).with_overrides(
        store_dir=store_dir,
        space_id=space,
        environment=environment,
        log_level="DEBUG" if verbose else None,
    )

    logging.basicConfig(
        level=config.level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    ctx.obj = config


def _reconciler(config: Config):
    from cmsync.sync.reconciler import Reconciler
    from cmsync.sync.store import LocalStore

    store = LocalStore(config.store_dir, space_id=config.space_id, environment=config.environment)
    return Reconciler(store)


# ── Plan ─────────────────────────────────────────────────────────────


@main.command()
@click.argument("declarations")
@click.pass_obj
def plan(config: Config, declarations: str):
    """Show what 'apply' would change for each declared content model."""
    from cmsync.sync.reconciler import PlanAction

    console.print(f"\n[bold blue]cmsync[/] — Planning: {declarations}\n")

    models = _load_models(declarations)
    reconciler = _reconciler(config)

    table = Table(title=f"Plan ({len(models)} content types)")
    table.add_column("Content type", style="cyan")
    table.add_column("Action")
    table.add_column("Drift")

    failed = False
    for model in models:
        try:
            p = reconciler.plan(model)
        except CMSyncError as e:
            failed = True
            console.print(f"[red]Cannot plan[/] {model.id or model.name}:")
            _print_diagnostics(e)
            continue

        action = {
            PlanAction.CREATE: "[green]create[/]",
            PlanAction.UPDATE: "[yellow]update[/]",
            PlanAction.NOOP: "[dim]none[/]",
        }[p.action]
        drift = ", ".join(p.drift.drift_types) if p.drift else ""
        table.add_row(model.id or model.name, action, drift)

        if p.drift:
            for detail in p.drift.details:
                console.print(f"  [dim]{model.id}[/] - {detail}")

    console.print(table)

    if failed:
        raise SystemExit(1)


# ── Apply ────────────────────────────────────────────────────────────


@main.command()
@click.argument("declarations")
@click.pass_obj
def apply(config: Config, declarations: str):
    """Write every drifted content model to the remote copy."""
    console.print(f"\n[bold blue]cmsync[/] — Applying: {declarations}\n")

    models = _load_models(declarations)
    reconciler = _reconciler(config)

    failed = False
    for model in models:
        try:
            p, result = reconciler.reconcile(model)
        except CMSyncError as e:
            failed = True
            console.print(f"  [red]FAILED[/] {model.id or model.name}")
            _print_diagnostics(e)
            continue

        console.print(
            f"  [green]OK[/] {p.summary()} "
            f"[dim](version {result.version}, controls {result.version_controls})[/]"
        )

    if failed:
        raise SystemExit(1)


# ── Import ───────────────────────────────────────────────────────────


@main.command(name="import")
@click.argument("model_id")
@click.option("--output", "-o", default=None, help="Write the declaration to this file")
@click.pass_obj
def import_model(config: Config, model_id: str, output: str | None):
    """Print the declaration of a remote content model."""
    from cmsync.declarations import dump_declarations

    try:
        model = _reconciler(config).read(model_id)
    except CMSyncError as e:
        _print_diagnostics(e)
        raise SystemExit(1)

    text = dump_declarations([model])

    if output:
        with open(output, "w") as f:
            f.write(text)
        console.print(f"[green]Declaration written to:[/] {output}")
    else:
        console.print(Panel(text, title=model_id))


# ── List ─────────────────────────────────────────────────────────────


@main.command(name="list")
@click.pass_obj
def list_models(config: Config):
    """List the content types held by the remote copy."""
    from cmsync.sync.store import LocalStore

    store = LocalStore(config.store_dir, space_id=config.space_id, environment=config.environment)
    content_types = store.list_content_types()

    if not content_types:
        console.print("[yellow]No content types found.[/]")
        return

    table = Table(title=f"Content types ({len(content_types)})")
    table.add_column("Id", style="cyan")
    table.add_column("Name")
    table.add_column("Version", justify="right")
    table.add_column("Fields", justify="right")

    for ct in content_types:
        table.add_row(ct.id, ct.name, str(ct.version), str(len(ct.fields)))

    console.print(table)


if __name__ == "__main__":
    main()
