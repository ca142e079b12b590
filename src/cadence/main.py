import asyncio
import json
from pathlib import Path
from typing import Any, Optional

import typer
from dotenv import load_dotenv

from cadence.application import Completes, Completion, Sources, Workspace
from cadence.config import Configuration, load_preferences
from cadence.domain.events import EventBus
from cadence.infrastructure.host import MemoryHost
from cadence.logger import get_logger, setup_logger
from cadence.sources import AroundSource, DictionarySource

load_dotenv()

cli = typer.Typer(
    name="cadence",
    help="Completion-session orchestrator: inspect sources and replay keystroke scripts",
    epilog="""
    Examples:
    $ cadence sources --filetype python --dictionary words.txt
    $ cadence replay session.json --debug
    """,
    add_completion=False,
)


def build_sources(
    configuration: Configuration,
    workspace: Workspace,
    dictionary: Optional[Path] = None,
    words: Optional[list[str]] = None,
) -> Sources:
    """Create the registry with the built-in sources."""
    sources = Sources(configuration)
    sources.register(AroundSource(workspace))
    sources.register(DictionarySource(words or [], path=dictionary))
    return sources


def build_completion(
    configuration: Configuration,
    workspace: Workspace,
    sources: Sources,
) -> Completion:
    completes = Completes(
        run_source=sources.complete,
        recent_limit=configuration.get("recentLimit", 50),
    )
    return Completion(sources, completes, configuration, workspace)


@cli.command()
def sources(
    filetype: str = typer.Option("", "--filetype", "-f", help="Filetype to list sources for"),
    dictionary: Optional[Path] = typer.Option(None, "--dictionary", "-d", help="Word list for the dictionary source"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Preferences JSON file"),
):
    """List the registered sources and their state."""
    configuration = Configuration(load_preferences(config))
    setup_logger(log_level=configuration.get("logLevel", "INFO"))

    async def _stat() -> list[dict[str, Any]]:
        workspace = Workspace()
        completion = build_completion(configuration, workspace, build_sources(configuration, workspace, dictionary))
        event_bus = EventBus()
        completion.init(MemoryHost(event_bus, filetype=filetype), event_bus)
        try:
            return [stat.to_dict() for stat in await completion.source_stat()]
        finally:
            completion.dispose()

    for stat in asyncio.run(_stat()):
        state = "disabled" if stat["disabled"] else "enabled"
        typer.echo(f"{stat['name']:<12} {stat['type']:<8} {state:<9} {stat['filepath']}")


@cli.command()
def replay(
    script: Path = typer.Argument(..., exists=True, dir_okay=False, help="Keystroke script (JSON)"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Preferences JSON file"),
    debug: bool = typer.Option(False, "--debug", help="Log to the console at DEBUG level"),
):
    """Replay a keystroke script against an in-memory buffer and print every menu shown."""
    configuration = Configuration(load_preferences(config))
    setup_logger(
        log_level="DEBUG" if debug else configuration.get("logLevel", "INFO"),
        console_output=debug,
    )
    logger = get_logger("main")

    with open(script, "r", encoding="utf-8") as f:
        data = json.load(f)

    host = asyncio.run(run_script(data, configuration))
    logger.info(f"Replayed {len(data.get('steps', []))} step(s) from {script}")

    for index, menu in enumerate(host.menus, start=1):
        typer.echo(f"menu {index} @ col {menu.col}: {' '.join(menu.words)}")
    for message in host.errors:
        typer.echo(f"error: {message}", err=True)
    typer.echo("--- buffer ---")
    typer.echo(host.text)


async def run_script(data: dict[str, Any], configuration: Configuration) -> MemoryHost:
    """
    Drive a MemoryHost through the steps of a replay script.

    Script keys: ``filetype``, ``lines`` (initial buffer), ``dictionary``
    (words for the dictionary source) and ``steps``, a list of single-key
    objects: ``{"type": "text"}``, ``{"backspace": n}``, ``{"select": i}``,
    ``{"accept": i}``, ``{"enter": true}``, ``{"leave": true}``,
    ``{"wait": seconds}``.

    Raises:
        ValueError: If a step is not recognised
    """
    event_bus = EventBus()
    workspace = Workspace()
    sources = build_sources(configuration, workspace, words=data.get("dictionary", []))
    completion = build_completion(configuration, workspace, sources)
    host = MemoryHost(
        event_bus,
        lines=data.get("lines", [""]),
        filetype=data.get("filetype", ""),
        workspace=workspace,
    )
    completion.init(host, event_bus)
    delay = float(data.get("delay", 0.0))

    try:
        for step in data.get("steps", []):
            if "type" in step:
                await host.type_text(step["type"], delay=delay)
            elif "backspace" in step:
                await host.backspace(int(step["backspace"]), delay=delay)
            elif "select" in step:
                await host.select(int(step["select"]))
            elif "accept" in step:
                await host.accept(int(step["accept"]))
            elif "enter" in step:
                host.enter_insert()
            elif "leave" in step:
                host.leave_insert()
            elif "wait" in step:
                await asyncio.sleep(float(step["wait"]))
            else:
                raise ValueError(f"Unknown replay step: {step}")
            await completion.wait_until_idle()
    finally:
        completion.dispose()
    return host


def run():
    """Entry point for the cadence CLI."""
    cli()


if __name__ == "__main__":
    run()
