"""Version ordering and Composer-style constraint matching.

Ordering is delegated to :mod:`packaging.version`; tags with a leading ``v``
are accepted. Strings that cannot be parsed (``dev-main``, branch names) sort
below every parsable version and lexically among themselves.
"""

from __future__ import annotations

import functools
import re
from typing import Iterable

from packaging.version import InvalidVersion, Version

from .errors import InvalidArgumentException

LATEST = "latest"

_OR_SPLIT_RE = re.compile(r"\s*\|\|?\s*")
_AND_SPLIT_RE = re.compile(r"\s*,\s*|\s+")
_OPERATOR_SPACE_RE = re.compile(r"(>=|<=|!=|==|>|<|=|\^|~)\s+")
_HYPHEN_RANGE_RE = re.compile(r"^(\S+)\s+-\s+(\S+)$")
_OPERATOR_RE = re.compile(r"^(>=|<=|!=|==|>|<|=)?(.+)$")
_NUMERIC_PARTS_RE = re.compile(r"^[vV]?(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:\.(\d+))?")
_WILDCARD_RE = re.compile(r"^[vV]?((?:\d+\.)*)[*xX]$")


def parse_version(value: str) -> Version | None:
    raw = str(value or "").strip()
    if raw[:1] in {"v", "V"}:
        raw = raw[1:]
    if not raw:
        return None
    try:
        return Version(raw)
    except InvalidVersion:
        return None


def compare_versions(left: str, right: str) -> int:
    parsed_left = parse_version(left)
    parsed_right = parse_version(right)
    if parsed_left is not None and parsed_right is not None:
        return (parsed_left > parsed_right) - (parsed_left < parsed_right)
    if parsed_left is None and parsed_right is None:
        return (left > right) - (left < right)
    return -1 if parsed_left is None else 1


def sort_versions(values: Iterable[str], *, descending: bool = True) -> list[str]:
    return sorted(values, key=functools.cmp_to_key(compare_versions), reverse=descending)


def is_prerelease(value: str) -> bool:
    parsed = parse_version(value)
    if parsed is None:
        return True
    return parsed.is_prerelease


def satisfies(version: str, constraint: str) -> bool:
    """Return True when ``version`` matches a Composer-style ``constraint``."""
    text = str(constraint or "").strip()
    if text in {"", "*", LATEST}:
        return True
    return any(_satisfies_group(version, group) for group in _OR_SPLIT_RE.split(text) if group)


def _satisfies_group(version: str, group: str) -> bool:
    group = group.strip()
    hyphen = _HYPHEN_RANGE_RE.match(group)
    if hyphen:
        requirements = [(">=", _require_version(hyphen.group(1)))]
        upper_parts = _numeric_parts(hyphen.group(2))
        if len(upper_parts) < 3:
            requirements.append(("<", _bump(upper_parts, len(upper_parts) - 1)))
        else:
            requirements.append(("<=", _require_version(hyphen.group(2))))
        return _check(version, requirements)

    normalized = _OPERATOR_SPACE_RE.sub(r"\1", group)
    for term in _AND_SPLIT_RE.split(normalized):
        if not term:
            continue
        if term.lower().startswith("dev-"):
            if version.strip().lower() != term.lower():
                return False
            continue
        if not _check(version, _term_requirements(term)):
            return False
    return True


def _term_requirements(term: str) -> list[tuple[str, Version]]:
    term = term.split("@", 1)[0]
    if term in {"*", ""}:
        return []

    wildcard = _WILDCARD_RE.match(term)
    if wildcard:
        prefix = [int(part) for part in wildcard.group(1).split(".") if part]
        if not prefix:
            return []
        low = Version(".".join(str(part) for part in prefix + [0] * (3 - len(prefix))))
        return [(">=", low), ("<", _bump(prefix, len(prefix) - 1))]

    if term.startswith("^"):
        parts = _numeric_parts(term[1:])
        if parts[0] != 0 or len(parts) == 1:
            index = 0
        elif parts[1] != 0 or len(parts) == 2:
            index = 1
        else:
            index = 2
        return [(">=", _require_version(term[1:])), ("<", _bump(parts, index))]

    if term.startswith("~"):
        parts = _numeric_parts(term[1:])
        index = 0 if len(parts) == 1 else len(parts) - 2
        return [(">=", _require_version(term[1:])), ("<", _bump(parts, index))]

    match = _OPERATOR_RE.match(term)
    if match is None:
        raise InvalidArgumentException(f"invalid version constraint: {term!r}")
    operator = match.group(1) or "=="
    if operator == "=":
        operator = "=="
    return [(operator, _require_version(match.group(2)))]


def _check(version: str, requirements: list[tuple[str, Version]]) -> bool:
    parsed = parse_version(version)
    if parsed is None:
        return False
    for operator, bound in requirements:
        if operator == ">=" and not parsed >= bound:
            return False
        if operator == ">" and not parsed > bound:
            return False
        if operator == "<=" and not parsed <= bound:
            return False
        if operator == "<" and not parsed < bound:
            return False
        if operator == "==" and not parsed == bound:
            return False
        if operator == "!=" and not parsed != bound:
            return False
    return True


def _require_version(value: str) -> Version:
    parsed = parse_version(value)
    if parsed is None:
        raise InvalidArgumentException(f"invalid version in constraint: {value!r}")
    return parsed


def _numeric_parts(value: str) -> list[int]:
    match = _NUMERIC_PARTS_RE.match(value.strip())
    if match is None:
        raise InvalidArgumentException(f"invalid version in constraint: {value!r}")
    return [int(part) for part in match.groups() if part is not None]


def _bump(parts: list[int], index: int) -> Version:
    bumped = parts[:index] + [parts[index] + 1]
    bumped += [0] * (3 - len(bumped))
    # .dev0 keeps pre-releases of the next boundary out of the range
    return Version(".".join(str(part) for part in bumped) + ".dev0")
