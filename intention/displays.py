"""
Rich console rendering for operation results.
Path: intention/displays.py

Prompts, paths and user names are user text and are escaped before they
reach rich markup.
"""

from typing import Any, Dict, List

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

class IntentDisplay:
    """Renders intents, decisions and analyses on a console"""

    def __init__(self, console: Console):
        self.console = console

    def show_error(self, error: str) -> None:
        self.console.print(Panel(f"[red]{escape(error)}[/]", title="Error", border_style="red"))

    def show_message(self, message: str, style: str = "green") -> None:
        self.console.print(f"[{style}]{escape(message)}[/]")

    def show_intents(self, intents: List[Dict[str, Any]], title: str) -> None:
        """Table of formatted intents (see skills.formatting)"""
        table = Table(title=escape(title), show_lines=False)
        if any("file_path" in intent for intent in intents):
            table.add_column("File", style="magenta")
        table.add_column("When", style="cyan", no_wrap=True)
        table.add_column("User", style="green")
        table.add_column("Prompt")
        table.add_column("Id", style="dim")

        for intent in intents:
            row = [intent["relative_time"], intent["user"], intent["prompt"], intent["id"][:8]]
            if "file_path" in intent:
                row.insert(0, intent["file_path"])
            table.add_row(*(escape(str(cell)) for cell in row))

        self.console.print(table)

    def show_decision(self, data: Dict[str, Any]) -> None:
        decision = data.get("decision", "proceed")
        conflict = data.get("conflict", {})
        styles = {"proceed": "green", "escalate": "yellow", "block": "red"}
        style = styles.get(decision, "blue")

        body = (f"Decision: [bold]{escape(decision.upper())}[/]\n"
                f"Conflict type: {escape(conflict.get('conflict_type', 'none'))}\n"
                f"Severity: {escape(conflict.get('severity', 'none'))}\n\n"
                f"{escape(conflict.get('recommendation', ''))}")
        self.console.print(Panel(body, title="Conflict Check", border_style=style))

        request = data.get("request")
        if request and request.get("requires_llm_analysis"):
            self.console.print(Panel(escape(request["analysis_prompt"]),
                                     title="Analysis Request",
                                     border_style="yellow"))

    def show_analysis(self, data: Dict[str, Any]) -> None:
        self.console.print(Panel(escape(data.get("summary", "")), title="Summary",
                                 border_style="blue"))

        if data.get("themes"):
            self.console.print(f"[bold]Themes:[/] {escape(', '.join(data['themes']))}")

        if data.get("contributors"):
            table = Table(title="Contributors")
            table.add_column("User", style="green")
            table.add_column("Changes", justify="right")
            table.add_column("Last", style="cyan")
            for info in data["contributors"]:
                table.add_row(escape(info["user"]), str(info["contribution_count"]),
                              escape(info["last_contribution"]))
            self.console.print(table)

        if data.get("timeline"):
            table = Table(title="Timeline")
            table.add_column("Date", style="cyan")
            table.add_column("User", style="green")
            table.add_column("Prompt")
            for entry in data["timeline"]:
                table.add_row(escape(entry["date"]), escape(entry["user"]), escape(entry["prompt"]))
            self.console.print(table)

        for recommendation in data.get("recommendations", []):
            self.console.print(f"[yellow]-[/] {escape(recommendation)}")
