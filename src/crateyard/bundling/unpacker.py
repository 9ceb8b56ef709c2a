import logging
import shutil
import tarfile
import zlib
from pathlib import Path

from ..domain.errors import UnpackError
from ..domain.models import PackageId

logger = logging.getLogger(__name__)

OK_MARKER = ".crateyard-ok"


class Unpacker:
    def __init__(self, src_dir: Path):
        self.src_dir = src_dir

    def get_unpack_path(self, package_id: PackageId) -> Path:
        path = self.src_dir / f"{package_id.name}-{package_id.version}"
        if path.parent.resolve() != self.src_dir.resolve():
            raise UnpackError(f"`{package_id}` does not name a directory in {self.src_dir}")
        return path

    def is_unpacked(self, package_id: PackageId) -> bool:
        return (self.get_unpack_path(package_id) / OK_MARKER).exists()

    def unpack_package(self, package_id: PackageId, tarball: Path) -> Path:
        """
        extract a gzipped tarball into the source directory.

        the archive must hold a single top-level `<name>-<version>` directory.
        nothing happens when the marker from a previous extraction is present;
        a directory left by an interrupted extraction is removed first.

        returns:
            path to the unpacked `<name>-<version>` directory
        """
        dst = self.get_unpack_path(package_id)
        if (dst / OK_MARKER).exists():
            logger.debug(f"{package_id} already unpacked at {dst}")
            return dst

        if dst.exists():
            shutil.rmtree(dst)
        dst.parent.mkdir(parents=True, exist_ok=True)

        try:
            with tarfile.open(tarball, "r:gz") as tar:
                tar.extractall(dst.parent, filter="data")
        except (tarfile.TarError, zlib.error, EOFError, OSError) as e:
            raise UnpackError(f"Failed to unpack package `{package_id}`: {e}") from e

        if not dst.is_dir():
            raise UnpackError(
                f"Failed to unpack package `{package_id}`: archive has no `{dst.name}` directory"
            )

        (dst / OK_MARKER).touch()
        return dst
