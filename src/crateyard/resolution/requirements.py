"""translation of registry-style version requirements into PEP 440.

index lines and resolver queries use the registry's requirement syntax
(`^1.2`, `~1.2.3`, `*`, `>=1.0.0, <1.1.0`, bare `1.2.3`).
"""
import re
from typing import List

from packaging.specifiers import InvalidSpecifier, SpecifierSet

from ..domain.errors import RequirementError

_COMPARATOR = re.compile(r"^(>=|<=|==|!=|>|<|=|\^|~)?\s*(.*)$")
_VERSION = re.compile(r"^(\d+)(?:\.(\d+|\*|x|X))?(?:\.(\d+|\*|x|X))?(.*)$")


def _parts(requirement: str, raw: str):
    match = _VERSION.match(raw)
    if not match:
        raise RequirementError(requirement, f"cannot parse version `{raw}`")
    major, minor, patch, rest = match.groups()
    wild = ("*", "x", "X")
    minor = None if minor in wild else minor
    patch = None if patch in wild or minor is None else patch
    return int(major), (int(minor) if minor is not None else None), (int(patch) if patch is not None else None), rest


def _full(major: int, minor, patch, rest: str = "") -> str:
    return f"{major}.{minor or 0}.{patch or 0}{rest}"


def _next(major: int, minor) -> str:
    """first release past every version a partial `major[.minor]` covers."""
    if minor is None:
        return f"{major + 1}.0.0"
    return f"{major}.{minor + 1}.0"


def _caret(requirement: str, raw: str) -> List[str]:
    major, minor, patch, rest = _parts(requirement, raw)
    lower = f">={_full(major, minor, patch, rest)}"
    if major > 0 or minor is None:
        upper = f"<{major + 1}.0.0"
    elif minor > 0 or patch is None:
        upper = f"<0.{minor + 1}.0"
    else:
        upper = f"<0.0.{patch + 1}"
    return [lower, upper]


def _tilde(requirement: str, raw: str) -> List[str]:
    major, minor, patch, rest = _parts(requirement, raw)
    lower = f">={_full(major, minor, patch, rest)}"
    return [lower, f"<{_next(major, minor)}"]


def _exact(requirement: str, raw: str) -> List[str]:
    major, minor, patch, rest = _parts(requirement, raw)
    if patch is None:
        return [f">={_full(major, minor, None)}", f"<{_next(major, minor)}"]
    return [f"=={_full(major, minor, patch, rest)}"]


def _comparison(requirement: str, op: str, raw: str) -> str:
    major, minor, patch, rest = _parts(requirement, raw)
    if patch is None:
        # a partial version stands for the whole range it covers
        if op == ">":
            return f">={_next(major, minor)}"
        if op == "<=":
            return f"<{_next(major, minor)}"
    return f"{op}{_full(major, minor, patch, rest)}"


def translate(requirement: str) -> List[str]:
    """translate a registry requirement into a list of PEP 440 clauses."""
    clauses = []
    for piece in requirement.split(","):
        piece = piece.strip()
        if not piece or piece == "*":
            continue
        op, raw = _COMPARATOR.match(piece).groups()
        raw = raw.strip()
        if not raw:
            raise RequirementError(requirement, f"missing version after `{op}`")
        if op in (None, "^"):
            clauses.extend(_caret(requirement, raw))
        elif op == "~":
            clauses.extend(_tilde(requirement, raw))
        elif op in ("=", "=="):
            clauses.extend(_exact(requirement, raw))
        else:
            clauses.append(_comparison(requirement, op, raw))
    return clauses


def to_specifier_set(requirement: str) -> SpecifierSet:
    try:
        return SpecifierSet(",".join(translate(requirement)))
    except InvalidSpecifier as e:
        raise RequirementError(requirement, str(e)) from e
