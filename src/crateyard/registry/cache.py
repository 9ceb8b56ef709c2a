import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path

from ..domain.errors import UnsafePathError
from ..domain.models import PackageId

logger = logging.getLogger(__name__)


class LocalCache:
    """one archive per (name, version); a file's presence means it was verified."""

    def __init__(self, cache_dir: Path):
        self.cache_dir = cache_dir

    def get_artifact_path(self, package_id: PackageId) -> Path:
        path = self.cache_dir / f"{package_id.name}-{package_id.version}.tar.gz"
        if path.parent.resolve() != self.cache_dir.resolve():
            raise UnsafePathError(f"`{package_id}` does not name a file in {self.cache_dir}")
        return path

    def has_artifact(self, package_id: PackageId) -> bool:
        return self.get_artifact_path(package_id).exists()

    @contextmanager
    def staging_file(self, package_id: PackageId):
        """
        yield an open temp file beside the artifact path.

        the temp file is removed on exit unless `commit` moved it into place.

        yields:
            tuple of (file object, commit callable)
        """
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        dst = self.get_artifact_path(package_id)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{dst.name}.", suffix=".part", dir=self.cache_dir)
        tmp_path = Path(tmp_name)
        committed = False

        def commit():
            nonlocal committed
            f.close()
            os.replace(tmp_path, dst)
            committed = True

        f = os.fdopen(fd, "wb")
        try:
            yield f, commit
        finally:
            if not committed:
                f.close()
                tmp_path.unlink(missing_ok=True)
                logger.debug(f"discarded partial download of {package_id}")
