from pathlib import Path
from typing import Dict, List, Optional

from packaging.specifiers import SpecifierSet
from pydantic import BaseModel, ConfigDict, Field

from ..resolution.requirements import to_specifier_set


class SourceId(BaseModel):
    """identifies one registry: its index url and the kind of source."""
    model_config = ConfigDict(frozen=True)

    url: str
    kind: str = "registry"

    def __str__(self) -> str:
        return f"{self.kind}+{self.url}"


class PackageId(BaseModel):
    """(name, version, source) triple naming one published artifact."""
    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    source_id: SourceId

    def __str__(self) -> str:
        return f"{self.name} v{self.version}"


class Dependency(BaseModel):
    """a requirement on a package, as produced by the resolver or an index line."""
    model_config = ConfigDict(frozen=True)

    name: str
    specifier: str = ""
    features: List[str] = Field(default_factory=list)
    optional: bool = False
    default_features: bool = True
    # decoded from the index but not yet used to filter anything
    target: Optional[str] = None
    source_id: Optional[SourceId] = None

    @property
    def specifier_set(self) -> SpecifierSet:
        return to_specifier_set(self.specifier)


class Summary(BaseModel):
    """the queryable form of one published version."""
    model_config = ConfigDict(frozen=True)

    package_id: PackageId
    dependencies: List[Dependency] = Field(default_factory=list)
    features: Dict[str, List[str]] = Field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.package_id.name

    @property
    def version(self) -> str:
        return self.package_id.version


class Package(BaseModel):
    """a fully materialized package (from an unpacked crate.json)."""
    name: str
    version: str
    dependencies: List[str] = Field(default_factory=list)
    description: str = ""
    license: Optional[str] = None
    root: Optional[Path] = None
    source_id: Optional[SourceId] = None

    @property
    def package_id(self) -> PackageId:
        if self.source_id is None:
            raise ValueError(f"package {self.name} has no source")
        return PackageId(name=self.name, version=self.version, source_id=self.source_id)
