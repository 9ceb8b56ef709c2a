from abc import ABC, abstractmethod
from typing import List

from ..domain.models import Dependency, Package, PackageId, Summary


class Registry(ABC):
    @abstractmethod
    def query(self, dependency: Dependency) -> List[Summary]:
        """Return the summaries of every version matching the dependency."""
        pass


class Source(ABC):
    @abstractmethod
    def update(self) -> None:
        """Bring the source's local view up to date."""
        pass

    @abstractmethod
    def download(self, package_ids: List[PackageId]) -> None:
        """Fetch and unpack the given packages so `get` can load them."""
        pass

    @abstractmethod
    def get(self, package_ids: List[PackageId]) -> List[Package]:
        """Load previously downloaded packages."""
        pass

    @abstractmethod
    def fingerprint(self, package: Package) -> str:
        """Token that changes whenever the package's content may have."""
        pass
