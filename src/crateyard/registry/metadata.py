"""decoding of the index's sharded, line-delimited metadata files."""
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ValidationError, field_validator

from ..domain.errors import MetadataParseError
from ..domain.models import Dependency, PackageId, SourceId, Summary
from ..resolution import matcher
from ..utils.paths import check_path_component

logger = logging.getLogger(__name__)


class _RegistryDependency(BaseModel):
    name: str
    req: str
    features: List[str]
    optional: bool
    default_features: bool
    target: Optional[str] = None


class _RegistryPackage(BaseModel):
    name: str
    vers: str
    deps: List[_RegistryDependency]
    features: Dict[str, List[str]]
    cksum: str

    @field_validator("name", "vers")
    @classmethod
    def _single_component(cls, value: str) -> str:
        return check_path_component(value)


def shard_path(name: str) -> Path:
    """relative location of a package's metadata file inside the index."""
    check_path_component(name)
    if len(name) == 1:
        return Path("1") / name
    if len(name) == 2:
        return Path("2") / name
    if len(name) == 3:
        return Path("3") / check_path_component(name[:1]) / name
    return Path(check_path_component(name[0:2])) / check_path_component(name[2:4]) / name


def to_summary(record: _RegistryPackage, source_id: SourceId) -> Summary:
    """map a decoded index line onto a summary."""
    deps = [
        Dependency(
            name=dep.name,
            specifier=dep.req,
            features=dep.features,
            optional=dep.optional,
            default_features=dep.default_features,
            target=dep.target,
            source_id=source_id,
        )
        for dep in record.deps
    ]
    return Summary(
        package_id=PackageId(name=record.name, version=record.vers, source_id=source_id),
        dependencies=deps,
        features=record.features,
    )


def encode_record(summary: Summary, cksum: str) -> str:
    """encode a summary back into a single index line."""
    record = _RegistryPackage(
        name=summary.name,
        vers=summary.version,
        deps=[
            _RegistryDependency(
                name=dep.name,
                req=dep.specifier,
                features=dep.features,
                optional=dep.optional,
                default_features=dep.default_features,
                target=dep.target,
            )
            for dep in summary.dependencies
        ],
        features=summary.features,
        cksum=cksum,
    )
    return json.dumps(record.model_dump(), separators=(",", ":"))


class MetadataIndex:
    """reads version summaries out of an index checkout.

    every decoded line records its checksum in `hashes`, keyed by
    (name, version); downloads look their expected digest up there.
    """

    def __init__(self, checkout_path: Path, source_id: SourceId):
        self.checkout_path = checkout_path
        self.source_id = source_id
        self.hashes: Dict[Tuple[str, str], str] = {}

    def path_for(self, name: str) -> Path:
        return self.checkout_path / shard_path(name)

    def summaries(self, name: str) -> List[Summary]:
        """
        decode every version listed for `name`, in file order.

        a missing or unreadable shard file means the package was never
        published here.
        any malformed line fails the whole lookup and records no checksums.
        """
        try:
            path = self.path_for(name)
        except ValueError:
            logger.debug(f"`{name}` cannot name an index entry")
            return []
        try:
            contents = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise MetadataParseError(name) from e
        except OSError:
            logger.debug(f"no index entry for {name} at {path}")
            return []

        summaries = []
        hashes = {}
        for number, line in enumerate(contents.splitlines(), start=1):
            if not line.strip():
                continue
            try:
                record = _RegistryPackage.model_validate_json(line)
            except ValidationError as e:
                raise MetadataParseError(name, number) from e
            summaries.append(to_summary(record, self.source_id))
            hashes[(record.name, record.vers)] = record.cksum

        self.hashes.update(hashes)
        return summaries

    def query(self, dependency: Dependency) -> List[Summary]:
        return matcher.query(self.summaries(dependency.name), dependency)

    def checksum(self, name: str, version: str) -> Optional[str]:
        return self.hashes.get((name, version))
