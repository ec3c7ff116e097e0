# intention/cli.py

import logging
from pathlib import Path
from typing import Optional

import structlog
import typer
from rich.console import Console
from rich.logging import RichHandler

from .config import IntentionConfig
from .displays import IntentDisplay
from .identity import UserIdentity
from .operations import IntentionService, OperationResult

cli = typer.Typer(help="Track the intent behind file changes and check for conflicts")
console = Console()
display = IntentDisplay(console)
logger = structlog.get_logger()

def setup_logging(level: str = "info", verbose: bool = False) -> None:
    """Setup structured logging with rich output"""
    log_level = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )

def build_service(config_path: Optional[Path], verbose: bool) -> IntentionService:
    config = IntentionConfig.load(config_path)
    setup_logging(config.logging.level, verbose)
    logger.debug("cli.service_ready",
                 workspace_root=str(config.workspace_root),
                 storage_dir=config.storage_dir)
    return IntentionService(config=config, identity=UserIdentity())

def finish(result: OperationResult, as_json: bool) -> OperationResult:
    """Print raw JSON when requested and exit non-zero on failure"""
    if as_json:
        console.print_json(data=result.to_dict(), default=str)
    elif not result.success:
        display.show_error(result.error or "Unknown error")
    if not result.success:
        raise typer.Exit(code=1)
    return result

ConfigOption = typer.Option(None, "--config", "-c", help="Path to custom config file")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Enable verbose logging")
JsonOption = typer.Option(False, "--json", help="Print the raw result as JSON")

@cli.command()
def log(
    file_path: str = typer.Argument(..., help="File that was modified"),
    prompt: str = typer.Argument(..., help="Why the change was made"),
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
    as_json: bool = JsonOption,
) -> None:
    """Record the intent behind a change made with other tools"""
    service = build_service(config_path, verbose)
    result = finish(service.log_intent(file_path, prompt), as_json)
    if not as_json:
        display.show_message(result.data["message"])

@cli.command()
def history(
    file_path: str = typer.Argument(..., help="File to show intents for"),
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
    as_json: bool = JsonOption,
) -> None:
    """Show the intent history of a file"""
    service = build_service(config_path, verbose)
    result = finish(service.get_history(file_path), as_json)
    if as_json:
        return
    if not result.data["intents"]:
        display.show_message("No intents recorded for this file", "yellow")
        return
    display.show_intents(result.data["intents"], f"Intent history: {file_path}")

@cli.command()
def check(
    file_path: str = typer.Argument(..., help="File about to be changed"),
    prompt: Optional[str] = typer.Option(None, "--prompt", "-p", help="Planned change to check"),
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
    as_json: bool = JsonOption,
) -> None:
    """Check a planned change against recent intents"""
    service = build_service(config_path, verbose)
    result = finish(service.check(file_path, prompt), as_json)
    if as_json:
        return
    if "decision" in result.data:
        display.show_decision(result.data)
    elif result.data.get("recent_intents"):
        display.show_intents(result.data["recent_intents"], result.data["message"])
        display.show_message(result.data["recommendation"], "yellow")
    else:
        display.show_message(result.data["message"])

@cli.command()
def analyze(
    file_path: str = typer.Argument(..., help="File to analyze"),
    prompt: str = typer.Argument(..., help="Planned change"),
    window_days: Optional[float] = typer.Option(None, "--window-days", "-w",
                                                help="Days to look back"),
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
    as_json: bool = JsonOption,
) -> None:
    """Prepare a conflict analysis request for an external reviewer"""
    service = build_service(config_path, verbose)
    result = finish(service.analyze(file_path, prompt, window_days), as_json)
    if not as_json:
        display.show_message(result.data["analysis_prompt"],
                             "yellow" if result.data["requires_llm_analysis"] else "green")

@cli.command()
def explain(
    file_path: str = typer.Argument(..., help="File to explain"),
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
    as_json: bool = JsonOption,
) -> None:
    """Explain how a file evolved from its intent history"""
    service = build_service(config_path, verbose)
    result = finish(service.explain(file_path), as_json)
    if as_json:
        return
    if "summary" in result.data:
        display.show_analysis(result.data)
    else:
        display.show_message(result.data["explanation"], "yellow")

@cli.command()
def search(
    query: str = typer.Argument(..., help="Text to look for in prompts"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Maximum results"),
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
    as_json: bool = JsonOption,
) -> None:
    """Search intents across all tracked files"""
    service = build_service(config_path, verbose)
    result = finish(service.search_intents(query, limit), as_json)
    if as_json:
        return
    if result.data["results"]:
        display.show_intents(result.data["results"], result.data["message"])
    else:
        display.show_message(result.data["message"], "yellow")

@cli.command()
def edit(
    file_path: str = typer.Argument(..., help="File to edit"),
    old_content: str = typer.Argument(..., help="Text to replace"),
    new_content: str = typer.Argument(..., help="Replacement text"),
    prompt: str = typer.Option(..., "--prompt", "-p", help="Why the change is made"),
    replace_all: bool = typer.Option(False, "--all", help="Replace every occurrence"),
    force: bool = typer.Option(False, "--force", help="Override detected conflicts"),
    skip_check: bool = typer.Option(False, "--skip-check", help="Skip the conflict check"),
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
    as_json: bool = JsonOption,
) -> None:
    """Replace text in a file and record the intent"""
    service = build_service(config_path, verbose)
    result = service.edit_file(file_path, old_content, new_content, prompt,
                               replace_all=replace_all, force=force,
                               skip_conflict_check=skip_check)
    if not result.success and "decision" in result.data and not as_json:
        display.show_decision(result.data)
    result = finish(result, as_json)
    if not as_json:
        display.show_message(result.data["message"])

@cli.command()
def write(
    file_path: str = typer.Argument(..., help="File to write"),
    source: typer.FileText = typer.Argument(..., help="File with the new content, or - for stdin"),
    prompt: str = typer.Option(..., "--prompt", "-p", help="Why the change is made"),
    force: bool = typer.Option(False, "--force", help="Override detected conflicts"),
    skip_check: bool = typer.Option(False, "--skip-check", help="Skip the conflict check"),
    config_path: Optional[Path] = ConfigOption,
    verbose: bool = VerboseOption,
    as_json: bool = JsonOption,
) -> None:
    """Write a file and record the intent"""
    service = build_service(config_path, verbose)
    result = service.write_file(file_path, source.read(), prompt,
                                force=force, skip_conflict_check=skip_check)
    if not result.success and "decision" in result.data and not as_json:
        display.show_decision(result.data)
    result = finish(result, as_json)
    if not as_json:
        display.show_message(result.data["message"])

def main():
    """Entry point for the CLI application"""
    cli()

if __name__ == "__main__":
    main()
