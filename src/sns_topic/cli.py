"""Typer CLI for SNS topic deployment."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from sns_topic.attributes.differ import Mutation
from sns_topic.aws.sns import SnsTopicClient
from sns_topic.aws.sts import StsIdentityResolver
from sns_topic.config.loader import load_topic_config
from sns_topic.config.models import TopicConfig
from sns_topic.errors import ApplyError, TopicError
from sns_topic.reconciler import ReconcilePlan, TopicReconciler
from sns_topic.state import FileStateStore

console = Console()
app = typer.Typer(name="sns-topic", help="Deploy and reconcile SNS topics")

DEFAULT_STATE_FILE = ".sns-topic/state.json"


def _load(config_path: str) -> TopicConfig:
    path = Path(config_path)
    if not path.exists():
        console.print(f"[red]Config file not found: {path}[/red]")
        raise typer.Exit(1)
    try:
        return load_topic_config(path)
    except TopicError as exc:
        console.print(f"[red]Invalid config:[/red] {exc}")
        raise typer.Exit(1) from exc


def build_reconciler(region: str) -> TopicReconciler:
    """Wire the boto3 adapters for *region* into a TopicReconciler."""
    sns = SnsTopicClient(region)
    return TopicReconciler(
        reader=sns,
        writer=sns,
        lifecycle=sns,
        identity=StsIdentityResolver(region),
    )


def _print_plan(plan: ReconcilePlan) -> None:
    if not plan.exists:
        console.print(f"[yellow]Topic will be created:[/yellow] {plan.arn}")
    if plan.empty:
        console.print(f"[green]No changes[/green] — {plan.arn}")
        return

    table = Table(title=f"Planned changes — {plan.arn}")
    table.add_column("Phase", style="cyan")
    table.add_column("Action")
    table.add_column("Attribute")
    table.add_column("Value")

    def _rows(phase: str, mutations: list[Mutation]) -> None:
        for m in mutations:
            if m.is_clear:
                table.add_row(phase, "[red]clear[/red]", m.name, "")
            else:
                table.add_row(phase, "[green]set[/green]", m.name, str(m.value))

    _rows("general", plan.general)
    _rows("delivery-status", plan.delivery_status)
    console.print(table)


@app.command()
def validate(
    config_path: str = typer.Argument(..., help="Path to topic YAML"),
) -> None:
    """Validate a topic configuration file."""
    config = _load(config_path)
    console.print(f"[green]Valid[/green] — topic={config.name}")
    console.print(f"  region:          {config.region}")
    console.print(f"  display name:    {config.display_name or '(none)'}")
    console.print(f"  policy:          {'custom' if config.policy else '(default)'}")
    console.print(
        f"  delivery policy: {'custom' if config.delivery_policy else '(default)'}"
    )
    if config.delivery_status_attributes:
        console.print("  delivery status:")
        for name, value in config.delivery_status_attributes.items():
            console.print(f"    - {name} = {value}")


@app.command()
def plan(
    config_path: str = typer.Argument(..., help="Path to topic YAML"),
) -> None:
    """Show the attribute changes a deploy would make."""
    config = _load(config_path)
    reconciler = build_reconciler(config.region)
    _print_plan(asyncio.run(reconciler.plan(config)))


@app.command()
def deploy(
    config_path: str = typer.Argument(..., help="Path to topic YAML"),
    state_file: str = typer.Option(
        DEFAULT_STATE_FILE, "--state-file", help="Where to record the topic state"
    ),
) -> None:
    """Create or update the topic and record its state."""
    config = _load(config_path)
    reconciler = build_reconciler(config.region)
    console.print(f"[yellow]Deploying[/yellow] {config.name} ({config.region})")

    try:
        result = asyncio.run(reconciler.deploy(config))
    except ApplyError as exc:
        console.print(
            f"[red]Deploy failed in {exc.phase} phase[/red] at '{exc.attribute}': "
            f"{exc.succeeded}/{exc.total} attribute(s) applied"
        )
        console.print(f"  cause: {exc.cause}")
        raise typer.Exit(1) from exc
    except TopicError as exc:
        console.print(f"[red]Deploy failed:[/red] {exc}")
        raise typer.Exit(1) from exc

    FileStateStore(state_file).save(result.state)
    action = "Created" if result.created else "Updated"
    console.print(
        f"[green]{action}[/green] — {result.general.count} general, "
        f"{result.delivery_status.count} delivery status attribute(s) applied"
    )
    for key, value in result.outputs.items():
        console.print(f"  {key}: {value}")


@app.command()
def remove(
    config_path: str | None = typer.Argument(None, help="Path to topic YAML"),
    state_file: str = typer.Option(
        DEFAULT_STATE_FILE, "--state-file", help="Recorded topic state"
    ),
) -> None:
    """Delete the topic and clear its recorded state."""
    store = FileStateStore(state_file)
    state = store.load()
    arn: str | None = None
    if config_path is not None:
        config = _load(config_path)
        name, region = config.name, config.region
    elif state is not None:
        name, region, arn = state.name, state.region, state.arn
    else:
        defaults = TopicConfig()
        name, region = defaults.name, defaults.region

    reconciler = build_reconciler(region)
    console.print(f"[yellow]Removing[/yellow] {name} ({region})")
    removed = asyncio.run(reconciler.remove(name, region, arn=arn))
    store.clear()
    console.print(f"[green]Removed[/green] {removed}")
