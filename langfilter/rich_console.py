"""
Rich console output and progress tracking
"""

from typing import List, Optional
from pathlib import Path
from rich.console import Console
from rich.progress import (
    Progress, SpinnerColumn, TextColumn, BarColumn,
    TaskProgressColumn, TimeElapsedColumn, TimeRemainingColumn
)
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich.panel import Panel
from rich import box

from .models import FileAnalysis, FileResult, FilterConfig, RunStats

# Global console instance
console = Console()


class RichOutput:
    """Rich console output manager"""

    def __init__(self, console: Console = console):
        self.console = console

    def print_header(self, title: str):
        """Print application header"""
        self.console.print(Panel.fit(
            f"[bold blue]{title}[/bold blue]",
            box=box.DOUBLE,
            border_style="blue"
        ))

    def print_file_path(self, path: Path):
        """Print file path being processed"""
        self.console.print(f"\n[bold cyan]Processing:[/bold cyan] {path}")

    def print_track_selection(self, analysis: FileAnalysis, debug_cmd: Optional[List[str]] = None):
        """Print the audio tracks of a file and what happens to each"""
        table = Table(show_header=True, header_style="bold magenta", box=box.ROUNDED)
        table.add_column("Stream", style="cyan", justify="right")
        table.add_column("Language", style="white")
        table.add_column("Action", style="white")

        selected = {s.source_index: s for s in analysis.selections}
        for track in analysis.tracks:
            selection = selected.get(track.index)
            if selection is None:
                action = "[red]drop[/red]"
            elif selection.default:
                action = f"[green]keep as a:{selection.output_position} (default)[/green]"
            else:
                action = f"[green]keep as a:{selection.output_position}[/green]"
            table.add_row(str(track.index), track.language or "unknown", action)

        self.console.print(table)

        if debug_cmd:
            self.console.print(Panel(
                ' '.join(debug_cmd),
                title="[bold yellow]FFmpeg Command[/bold yellow]",
                border_style="yellow"
            ))

    def print_config_summary(self, config: FilterConfig, log_file: Optional[Path] = None):
        """Print the run configuration before asking for confirmation"""
        table = Table(show_header=False, box=box.ROUNDED)
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="white")

        table.add_row("Target", str(config.target))
        table.add_row("Languages to keep", ' '.join(config.languages))
        table.add_row("Default language", config.default_language or "None")
        if config.timeout:
            table.add_row("Timeout", f"{config.timeout:g}s")
        if config.keep_backup:
            table.add_row("Backups", "enabled")
        if config.workers > 1:
            table.add_row("Workers", str(config.workers))
        if config.dry_run:
            table.add_row("Mode", "[yellow]dry run[/yellow]")
        if log_file:
            table.add_row("Log file", str(log_file))

        self.console.print(Panel(
            table,
            title="[bold blue]Configuration Summary[/bold blue]",
            border_style="blue"
        ))

    def create_progress_bar(self, total_duration: Optional[float] = None) -> Progress:
        """Create and return a progress bar for FFmpeg processing"""
        if total_duration:
            # Time-based progress for FFmpeg
            return Progress(
                SpinnerColumn(),
                TextColumn("[bold blue]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                TimeElapsedColumn(),
                TimeRemainingColumn(),
                console=self.console,
                transient=True
            )
        # Indeterminate progress
        return Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            TimeElapsedColumn(),
            console=self.console,
            transient=True
        )

    def print_success(self, message: str = "Processing completed!"):
        """Print success message"""
        self.console.print(f"[bold green]✓ {message}[/bold green]")

    def print_error(self, message: str, details: Optional[str] = None):
        """Print error message"""
        self.console.print(f"[bold red]✗ {message}[/bold red]")
        if details:
            self.console.print(f"[red]Details: {details}[/red]")

    def print_warning(self, message: str):
        """Print warning message"""
        self.console.print(f"[bold yellow]⚠ {message}[/bold yellow]")

    def print_info(self, message: str):
        """Print info message"""
        self.console.print(f"[bold cyan]ℹ {message}[/bold cyan]")

    def print_skipped(self, reason: str = "Skipped"):
        """Print skip message"""
        self.console.print(f"[bold yellow]⏭ {reason}[/bold yellow]")

    def print_interrupted(self, message: str = "Processing interrupted"):
        """Print interruption message"""
        self.console.print(f"\n[bold red]⏹ {message}[/bold red]")

    def print_final_summary(self, stats: RunStats, log_file: Optional[Path] = None):
        """Print final processing summary"""
        status_icon = "✓" if not stats.interrupted else "⏹"
        status_color = "green" if not stats.interrupted else "yellow"
        title = "Processing Complete" if not stats.interrupted else "Processing Interrupted"

        table = Table(show_header=True, header_style="bold magenta", box=box.ROUNDED)
        table.add_column("Metric", style="cyan")
        table.add_column("Count", style="white", justify="right")

        table.add_row("Total Files", str(stats.total_files))
        table.add_row("Processed", f"[green]{stats.processed_count}[/green]")
        table.add_row("Skipped", f"[yellow]{stats.skipped_count}[/yellow]")
        table.add_row("Errors", f"[red]{stats.error_count}[/red]" if stats.error_count else "0")

        if stats.processing_duration is not None:
            table.add_row("Duration", f"{stats.processing_duration:.1f}s")

        self.console.print(Panel(
            table,
            title=f"[bold {status_color}]{status_icon} {title}[/bold {status_color}]",
            border_style=status_color
        ))

        self._print_result_list("Processed files", stats.processed, "green")
        self._print_result_list("Skipped files", stats.skipped, "yellow")
        self._print_result_list("Files with errors", stats.errored, "red")

        if log_file:
            self.print_info(f"Full log saved to: {log_file}")

    def _print_result_list(self, title: str, results: List[FileResult], color: str):
        if not results:
            return
        self.console.print(f"\n[bold {color}]{title}:[/bold {color}]")
        for result in results:
            self.console.print(f"  - {result.summary}", markup=False, highlight=False)

    def ask_text(self, prompt: str, default: Optional[str] = None) -> str:
        """Ask for a line of input"""
        return Prompt.ask(prompt, console=self.console, default=default) or ''

    def ask_confirmation(self, prompt: str = "Proceed with processing?", default: bool = False) -> bool:
        """Ask a yes/no question"""
        return Confirm.ask(prompt, console=self.console, default=default)


# Global rich output instance
rich_output = RichOutput()
