import json
import logging
from pathlib import Path
from typing import List, Optional

import httpx
from pydantic import BaseModel, ValidationError

from ..bundling.unpacker import Unpacker
from ..config import (
    CONFIG_DIR,
    DEFAULT_INDEX_URL,
    get_index_url,
    registry_cache_path,
    registry_dir_name,
    registry_index_path,
    registry_source_path,
)
from ..domain.errors import ConfigMissingError
from ..domain.models import Dependency, Package, PackageId, SourceId, Summary
from ..sources.path import PathSource
from ..ui.progress import ProgressManager
from .cache import LocalCache
from .client import Registry, Source
from .download import Downloader, download_url
from .index import IndexStore
from .metadata import MetadataIndex

logger = logging.getLogger(__name__)


class RegistryConfig(BaseModel):
    """contents of `config.json` at the root of the index."""
    dl: str
    api: str


class RegistrySource(Registry, Source):
    """a single registry: index checkout, archive cache and unpacked sources.

    `download` needs the checksums recorded by a prior `query` for the same
    packages; asking for an unqueried package raises ChecksumCacheMiss.
    """

    def __init__(
        self,
        source_id: SourceId,
        home: Path = CONFIG_DIR,
        http_client: Optional[httpx.Client] = None,
        progress_manager: Optional[ProgressManager] = None,
    ):
        part = registry_dir_name(source_id)
        self.source_id = source_id
        self.checkout_path = registry_index_path(home) / part
        self.cache_path = registry_cache_path(home) / part
        self.src_path = registry_source_path(home) / part

        self.progress_manager = progress_manager or ProgressManager()
        self.index = IndexStore(self.checkout_path, source_id)
        self.metadata = MetadataIndex(self.checkout_path, source_id)
        self.cache = LocalCache(self.cache_path)
        self.downloader = Downloader(self.cache, self.metadata.checksum, self._client)
        self.unpacker = Unpacker(self.src_path)
        self.sources: List[PathSource] = []

        self._http_client = http_client
        self._owns_client = http_client is None

    @staticmethod
    def index_url() -> str:
        """
        the configured registry index url.

        this is the default registry unless overridden in the config file.
        """
        return get_index_url()

    @staticmethod
    def default_url() -> str:
        return DEFAULT_INDEX_URL

    def _client(self) -> httpx.Client:
        if self._http_client is None:
            self._http_client = httpx.Client(follow_redirects=True)
        return self._http_client

    def close(self):
        if self._owns_client and self._http_client is not None:
            self._http_client.close()
            self._http_client = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def config(self) -> RegistryConfig:
        """
        decode the configuration stored within the registry.

        this requires that the index has been at least checked out.
        """
        path = self.checkout_path / "config.json"
        try:
            with open(path, "r", encoding="utf-8") as f:
                return RegistryConfig(**json.load(f))
        except FileNotFoundError as e:
            raise ConfigMissingError(f"registry index has no config.json at {path}") from e
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            raise ConfigMissingError(f"malformed registry config at {path}: {e}") from e

    def query(self, dependency: Dependency) -> List[Summary]:
        return self.metadata.query(dependency)

    def update(self) -> None:
        self.progress_manager.status("Updating", f"registry `{self.source_id.url}`")
        with self.progress_manager.spinner("fetching index"):
            self.index.update()

    def download(self, package_ids: List[PackageId]) -> None:
        config = self.config()
        for package_id in package_ids:
            if package_id.source_id != self.source_id:
                logger.debug(f"skipping {package_id} from {package_id.source_id}")
                continue

            url = download_url(config.dl, package_id)
            path = self.cache.get_artifact_path(package_id)
            if not path.exists():
                self.progress_manager.status("Downloading", package_id)
                with self.progress_manager.download_progress() as progress:
                    task_id = progress.add_task(f"{package_id.name}", total=None)
                    path = self.downloader.download_package(package_id, url, progress, task_id)

            path = self.unpacker.unpack_package(package_id, path)
            if any(src.root == path for src in self.sources):
                continue
            src = PathSource(path, self.source_id)
            src.update()
            self.sources.append(src)

    def get(self, package_ids: List[PackageId]) -> List[Package]:
        ret = []
        for src in self.sources:
            ret.extend(src.get(package_ids))
        return ret

    def fingerprint(self, package: Package) -> str:
        return package.version
