import logging
import shutil
import subprocess
from pathlib import Path

from ..domain.errors import IndexFetchError, IndexIntegrityError, IndexOpenError
from ..domain.models import SourceId
from . import git

logger = logging.getLogger(__name__)

REFSPEC = "refs/heads/*:refs/remotes/origin/*"


class IndexStore:
    """local git mirror of a registry index, synchronized by fetch + hard reset."""

    def __init__(self, checkout_path: Path, source_id: SourceId, branch: str = "master"):
        self.checkout_path = checkout_path
        self.source_id = source_id
        self.branch = branch

    @property
    def tracking_ref(self) -> str:
        return f"refs/remotes/origin/{self.branch}"

    def open(self) -> Path:
        """
        open the checkout, creating a fresh empty repository if needed.

        an existing path that is not a usable repository is wiped and
        re-initialized. no remotes are configured.

        returns:
            path to the checkout
        """
        if git.is_repository(self.checkout_path):
            return self.checkout_path

        logger.debug(f"initializing fresh index checkout at {self.checkout_path}")
        try:
            if self.checkout_path.exists():
                shutil.rmtree(self.checkout_path)
            self.checkout_path.mkdir(parents=True, exist_ok=True)
            git.init(self.checkout_path)
        except subprocess.CalledProcessError as e:
            raise IndexOpenError(
                f"failed to initialize index at {self.checkout_path}: {e.stderr}"
            ) from e
        except OSError as e:
            raise IndexOpenError(
                f"failed to initialize index at {self.checkout_path}: {e}"
            ) from e
        return self.checkout_path

    def update(self) -> str:
        """
        fetch every remote branch and hard-reset the checkout to the tracking ref.

        returns:
            the commit id the checkout now points at
        """
        path = self.open()
        url = self.source_id.url

        # git fetch <url> refs/heads/*:refs/remotes/origin/*
        try:
            git.fetch(path, url, REFSPEC)
        except subprocess.CalledProcessError as e:
            raise IndexFetchError(url, (e.stderr or "").strip()) from e

        # git reset --hard origin/<branch>
        try:
            oid = git.resolve_ref(path, self.tracking_ref)
        except subprocess.CalledProcessError as e:
            raise IndexIntegrityError(
                f"no `{self.tracking_ref}` in index of {url} after fetch"
            ) from e
        if not oid:
            raise IndexIntegrityError(f"no `{self.tracking_ref}` in index of {url} after fetch")

        logger.debug(f"[{self.source_id}] updating to rev {oid}")
        try:
            git.reset_hard(path, oid)
        except subprocess.CalledProcessError as e:
            raise IndexIntegrityError(f"failed to reset index to {oid}: {e.stderr}") from e
        return oid
