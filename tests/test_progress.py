"""test suite for progress manager."""
import pytest
from pathlib import Path
import sys
from io import StringIO
from unittest.mock import Mock, patch

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rich.console import Console

from crateyard.ui.progress import ProgressManager, _DummyProgress


class TestProgressManager:
    """test progress manager functionality."""
    
    def test_initialization_custom_console(self):
        """test progress manager accepts custom console."""
        custom_console = Console()
        pm = ProgressManager(console=custom_console)
        assert pm.console is custom_console
    
    def test_tty_detection_interactive(self):
        with patch('sys.stdout.isatty', return_value=True):
            pm = ProgressManager()
            assert pm._enabled is True
    
    def test_tty_detection_non_interactive(self):
        with patch('sys.stdout.isatty', return_value=False):
            pm = ProgressManager()
            assert pm._enabled is False
    
    def test_status_line(self):
        """test status prints verb and message."""
        buf = StringIO()
        pm = ProgressManager(console=Console(file=buf, width=120))
        pm.status("Downloading", "sample v1.0.1")
        output = buf.getvalue()
        assert "Downloading" in output
        assert "sample v1.0.1" in output
    
    def test_spinner_context_non_interactive(self):
        """test spinner context in non-interactive mode prints message."""
        with patch('sys.stdout.isatty', return_value=False):
            mock_console = Mock(spec=Console)
            pm = ProgressManager(console=mock_console)
            
            with pm.spinner("fetching index") as task_id:
                assert task_id is None
            
            mock_console.print.assert_called_once_with("fetching index...")
    
    def test_spinner_context_interactive(self):
        with patch('sys.stdout.isatty', return_value=True):
            pm = ProgressManager(console=Console(file=StringIO()))
            with pm.spinner("fetching index") as task_id:
                assert task_id is not None
    
    def test_download_progress_interactive(self):
        with patch('sys.stdout.isatty', return_value=True):
            pm = ProgressManager(console=Console(file=StringIO()))
            with pm.download_progress() as progress:
                task_id = progress.add_task("sample", total=100)
                progress.update(task_id, completed=50)
    
    def test_download_progress_non_interactive(self):
        with patch('sys.stdout.isatty', return_value=False):
            pm = ProgressManager()
            with pm.download_progress() as progress:
                assert isinstance(progress, _DummyProgress)

    def test_download_progress_with_exceptions(self):
        with patch('sys.stdout.isatty', return_value=True):
            pm = ProgressManager(console=Console(file=StringIO()))
            with pytest.raises(ValueError):
                with pm.download_progress() as progress:
                    progress.add_task("sample", total=10)
                    raise ValueError("test error")


class TestDummyProgress:
    """test dummy progress fallback."""
    
    def test_calls_are_no_ops(self):
        dp = _DummyProgress()
        task_id = dp.add_task("test", total=10)
        assert task_id is not None
        dp.update(task_id, completed=5)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
