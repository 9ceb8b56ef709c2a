"""requirement matching: filters summaries by a dependency's version range."""
import logging
from typing import List

from packaging.version import InvalidVersion, Version

from ..domain.models import Dependency, Summary

logger = logging.getLogger(__name__)


def matches(dependency: Dependency, summary: Summary) -> bool:
    if dependency.name != summary.name:
        return False
    try:
        version = Version(summary.version)
    except InvalidVersion:
        logger.debug(f"skipping unparseable version {summary.version} of {summary.name}")
        return False
    return dependency.specifier_set.contains(version, prereleases=True)


def query(summaries: List[Summary], dependency: Dependency) -> List[Summary]:
    """filter summaries by a dependency, preserving their order."""
    return [summary for summary in summaries if matches(dependency, summary)]
