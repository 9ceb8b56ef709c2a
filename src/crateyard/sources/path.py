import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from pydantic import ValidationError

from ..domain.errors import ManifestError
from ..domain.models import Package, PackageId, SourceId

logger = logging.getLogger(__name__)

MANIFEST_FILE = "crate.json"


class PathSource:
    """serves the package found in a single directory on disk."""

    def __init__(self, root: Path, source_id: SourceId):
        self.root = root
        self.source_id = source_id
        self.package: Optional[Package] = None

    def update(self) -> None:
        """load the directory's manifest."""
        manifest = self.root / MANIFEST_FILE
        try:
            with open(manifest, "r", encoding="utf-8") as f:
                data = json.load(f)
            self.package = Package(**data, root=self.root, source_id=self.source_id)
        except FileNotFoundError as e:
            raise ManifestError(f"no {MANIFEST_FILE} in {self.root}") from e
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            raise ManifestError(f"failed to read {manifest}: {e}") from e
        logger.debug(f"loaded {self.package.package_id} from {self.root}")

    def get(self, package_ids: Iterable[PackageId]) -> List[Package]:
        if self.package is None:
            raise ManifestError(f"source at {self.root} has not been updated")
        wanted = set(package_ids)
        if self.package.package_id in wanted:
            return [self.package]
        return []
