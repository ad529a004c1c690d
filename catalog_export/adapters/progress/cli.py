"""
CLI Progress Adapter

Provides progress reporting for command-line exports: a single status line
redrawn in place with backspaces, or a rich progress bar on interactive
terminals.
"""

import sys
from typing import Optional, TextIO

from rich.console import Console
from rich.progress import (
    BarColumn, MofNCompleteColumn, Progress, TaskID, TextColumn, TimeElapsedColumn
)

from ...core.domain import ExportSummary, ProgressState
from .silent import SilentProgressAdapter


class BackspaceProgressAdapter:
    """
    Plain-text progress: "processing: <current> / <total> " redrawn in place.

    The previous status is erased with as many backspaces as it was wide.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream
        self.state = ProgressState()

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    def _write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def start(self, total: int) -> None:
        self.state = ProgressState(total=total)
        self._write("processing: ")

    def update(self, current: int, total: int) -> None:
        self.state.current = current
        self.state.total = total
        status = self.state.render()
        self._write("\b" * self.state.last_width + status)
        self.state.last_width = len(status)

    def finish(self, summary: ExportSummary) -> None:
        self._write("\n" + summary.message + "\n")

    def stop(self) -> None:
        """End the status line so error output starts on a fresh one"""
        self._write("\n")

    def is_progress_enabled(self) -> bool:
        return True


class RichProgressAdapter:
    """Progress bar using the rich library, drawn on stderr by default"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(stderr=True)
        self.progress = Progress(
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self.console
        )
        self.current_task: Optional[TaskID] = None

    def start(self, total: int) -> None:
        self.progress.start()
        self.current_task = self.progress.add_task("processing", total=total)

    def update(self, current: int, total: int) -> None:
        if self.current_task is None:
            self.start(total)
        self.progress.update(self.current_task, completed=current, total=total)

    def finish(self, summary: ExportSummary) -> None:
        if self.current_task is not None:
            self.progress.update(self.current_task, completed=summary.processed)
        self.progress.stop()
        self.current_task = None
        self.console.print(f"✅ {summary.message}")

    def stop(self) -> None:
        self.progress.stop()
        self.current_task = None

    def is_progress_enabled(self) -> bool:
        return True


def create_cli_progress_adapter(progress_type: str = "auto", **kwargs):
    """
    Factory function to create appropriate CLI progress adapter.

    Args:
        progress_type: Type of progress adapter ("auto", "backspace", "rich", "silent")
        **kwargs: Additional arguments for the adapter

    Returns:
        Configured progress adapter
    """
    if progress_type == "auto":
        progress_type = "rich" if sys.stderr.isatty() else "backspace"

    if progress_type == "backspace":
        return BackspaceProgressAdapter(stream=kwargs.get('stream'))
    elif progress_type == "rich":
        return RichProgressAdapter(console=kwargs.get('console'))
    elif progress_type == "silent":
        return SilentProgressAdapter()
    else:
        raise ValueError(f"Unknown progress type: {progress_type}")
