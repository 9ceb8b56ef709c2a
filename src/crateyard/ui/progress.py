"""console status and progress output for registry operations."""

import sys
from contextlib import contextmanager
from typing import Optional
from rich.console import Console
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    DownloadColumn,
    TransferSpeedColumn,
    TimeRemainingColumn,
    TaskID,
)


class ProgressManager:
    """central manager for status lines and progress bars."""
    
    def __init__(self, console: Optional[Console] = None):
        """
        initialize progress manager.
        
        args:
            console: optional rich console instance. if not provided, creates new one.
        """
        self.console = console or Console()
        self._enabled = self._should_show_progress()
    
    def _should_show_progress(self) -> bool:
        """
        check if we should show progress bars.
        
        returns false in non-interactive environments (ci/cd, piped output).
        """
        return sys.stdout.isatty() and not sys.stdout.closed
    
    def status(self, verb: str, message: object):
        """print a right-aligned status verb followed by a message."""
        self.console.print(f"[bold green]{verb:>12}[/bold green] {message}", highlight=False)
    
    @contextmanager
    def spinner(self, description: str, transient: bool = True):
        """
        create an indeterminate spinner for unknown-duration tasks.
        
        args:
            description: text to display next to spinner
            transient: if true, spinner disappears when done
            
        yields:
            task id for the spinner
        """
        if not self._enabled:
            self.console.print(f"{description}...")
            yield None
            return
        
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.console,
            transient=transient,
        ) as progress:
            task_id = progress.add_task(description, total=None)
            yield task_id
    
    @contextmanager
    def download_progress(self):
        """
        create a download progress context with transfer speed tracking.
        
        yields:
            Progress instance configured for downloads
        """
        if not self._enabled:
            yield _DummyProgress()
            return
        
        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            TimeRemainingColumn(),
            console=self.console,
            transient=True,
        ) as progress:
            yield progress


class _DummyProgress:
    """dummy progress object for non-interactive mode."""
    
    def add_task(self, description: str, total: Optional[int] = None, **kwargs) -> TaskID:
        return TaskID(0)
    
    def update(self, task_id: TaskID, **kwargs):
        pass
