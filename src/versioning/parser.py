"""Token parsing utilities for version constraints."""

import re
from typing import List, Optional, Tuple

from constants import Constants

from .models import InvalidVersionSpecificationError, Restriction

_SNAPSHOT = re.compile(Constants.SNAPSHOT_PATTERN)


def split_qualifiers(comma_separated: Optional[str]) -> List[str]:
    """Split a comma separated pattern list; all whitespace is removed first."""
    if comma_separated is None:
        return []
    compact = re.sub(r"\s", "", comma_separated)
    return [item for item in compact.split(',') if item]


def match_snapshot(version: Optional[str]) -> Optional[Tuple[str, str]]:
    """Return (approached release, snapshot marker) for snapshot versions.

    Both ``1.0-SNAPSHOT`` and deployed timestamps such as
    ``1.0-20240101.120000-3`` approach ``1.0``.
    """
    if not version:
        return None
    match = _SNAPSHOT.match(version.strip())
    if match is None:
        return None
    return match.group(1), match.group(2)


def _parse_restriction(text: str) -> Restriction:
    lower_inclusive = text.startswith('[')
    upper_inclusive = text.endswith(']')
    inner = text[1:-1].strip()

    if ',' not in inner:
        if not (lower_inclusive and upper_inclusive):
            raise InvalidVersionSpecificationError(
                f"Single version must be surrounded by []: {text}"
            )
        if not inner:
            raise InvalidVersionSpecificationError(f"Empty version in range: {text}")
        return Restriction(inner, True, inner, True)

    lower_text, upper_text = inner.split(',', 1)
    if ',' in upper_text:
        raise InvalidVersionSpecificationError(f"Invalid range, too many bounds: {text}")
    lower = lower_text.strip() or None
    upper = upper_text.strip() or None
    return Restriction(lower, lower_inclusive, upper, upper_inclusive)


def parse_restrictions(spec: str) -> Tuple[Restriction, ...]:
    """Parse a range expression into restrictions.

    Accepts ``[a,b]``, ``(a,b)``, half-open forms, omitted bounds such as
    ``(,b]``, single points ``[a]``, comma-joined unions like
    ``[1,2),[3,4)`` and a bare version, which is treated as an exact point.
    Bound ordering is checked later, by VersionRange, against a comparator.
    """
    process = (spec or "").strip()
    if not process:
        raise InvalidVersionSpecificationError("Empty version range")

    if process[0] not in '[(':
        if any(char in process for char in '[](),'):
            raise InvalidVersionSpecificationError(f"Invalid version range '{spec}'")
        return (Restriction(process, True, process, True),)

    restrictions: List[Restriction] = []
    while process.startswith(('[', '(')):
        candidates = [i for i in (process.find(']'), process.find(')')) if i >= 0]
        if not candidates:
            raise InvalidVersionSpecificationError(f"Unbounded range: {spec}")
        index = min(candidates)
        opener = max(process.rfind('[', 1, index), process.rfind('(', 1, index))
        if opener >= 0:
            raise InvalidVersionSpecificationError(f"Unbalanced range brackets: {spec}")
        restrictions.append(_parse_restriction(process[:index + 1]))
        process = process[index + 1:].strip()
        if process.startswith(','):
            process = process[1:].strip()
            if not process:
                raise InvalidVersionSpecificationError(f"Trailing separator in range: {spec}")

    if process:
        raise InvalidVersionSpecificationError(
            f"Only fully-qualified sets allowed in multiple set scenario: {spec}"
        )
    return tuple(restrictions)
