"""thin wrappers over the git command line used by the index store."""
import subprocess
from pathlib import Path
from typing import List


def run_git(args: List[str], cwd: Path) -> str:
    """
    run a git command and return its stripped stdout.

    raises subprocess.CalledProcessError on a non-zero exit and
    FileNotFoundError when git is not installed.
    """
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True
    )
    return result.stdout.strip()


def is_repository(path: Path) -> bool:
    """true when `path` is itself the top level of a git work tree."""
    if not path.is_dir():
        return False
    try:
        toplevel = run_git(["rev-parse", "--show-toplevel"], path)
    except (subprocess.CalledProcessError, FileNotFoundError):
        return False
    return Path(toplevel).resolve() == path.resolve()


def init(path: Path) -> None:
    run_git(["init", "--quiet"], path)


def fetch(path: Path, url: str, refspec: str) -> None:
    run_git(["fetch", "--quiet", "--force", url, refspec], path)


def resolve_ref(path: Path, reference: str) -> str:
    return run_git(["rev-parse", "--verify", "--quiet", f"{reference}^{{commit}}"], path)


def reset_hard(path: Path, oid: str) -> None:
    run_git(["reset", "--hard", "--quiet", oid], path)
