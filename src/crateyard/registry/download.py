import hashlib
import logging
from pathlib import Path
from typing import Callable, Optional, TYPE_CHECKING

import httpx

from ..domain.errors import ChecksumCacheMiss, ChecksumMismatch, TransportError
from ..domain.models import PackageId
from .cache import LocalCache

if TYPE_CHECKING:
    from rich.progress import TaskID

logger = logging.getLogger(__name__)


def download_url(dl: str, package_id: PackageId) -> str:
    return f"{dl.rstrip('/')}/{package_id.name}/{package_id.version}/download"


class Downloader:
    """fetches archives into the local cache, verifying them against the index."""

    def __init__(
        self,
        cache: LocalCache,
        checksum: Callable[[str, str], Optional[str]],
        client_factory: Callable[[], httpx.Client],
    ):
        self.cache = cache
        self.checksum = checksum
        self.client_factory = client_factory

    def download_package(
        self,
        package_id: PackageId,
        url: str,
        progress=None,
        task_id: Optional["TaskID"] = None
    ) -> Path:
        """
        download a package into the local cache.

        no network traffic happens when the archive is already cached.
        the body is hashed while streaming and only moved into the cache
        path once its digest matches the one listed in the index.

        args:
            package_id: package being downloaded
            url: download url for the archive
            progress: optional Progress instance for tracking download
            task_id: optional task id for updating progress

        returns:
            path to the cached archive
        """
        dst = self.cache.get_artifact_path(package_id)
        if dst.exists():
            logger.debug(f"{package_id} already cached at {dst}")
            return dst

        expected = self.checksum(package_id.name, package_id.version)
        if expected is None:
            raise ChecksumCacheMiss(str(package_id))

        client = self.client_factory()
        state = hashlib.sha256()
        with self.cache.staging_file(package_id) as (f, commit):
            try:
                with client.stream("GET", url, follow_redirects=True) as response:
                    if response.status_code != 200:
                        raise TransportError(url, response.status_code, response.reason_phrase)

                    if "content-length" in response.headers and progress and task_id is not None:
                        progress.update(task_id, total=int(response.headers["content-length"]))

                    downloaded = 0
                    for chunk in response.iter_bytes():
                        state.update(chunk)
                        f.write(chunk)
                        downloaded += len(chunk)
                        if progress and task_id is not None:
                            progress.update(task_id, completed=downloaded)
            except httpx.HTTPError as e:
                raise TransportError(url, None, str(e)) from e

            actual = state.hexdigest()
            if actual.lower() != expected.lower():
                raise ChecksumMismatch(str(package_id), expected, actual)
            commit()

        return dst
