"""Version tokenization shared by the comparison strategies.

Holds the parsed ``ArtifactVersion`` structure (numeric components, build
number, qualifier), the qualifier ranking table and the token increment
helper used to derive exclusive bounds.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from constants import Constants

_INTEGER = re.compile(r"[0-9]+")
_QUALIFIER_PARTS = re.compile(r"([a-z]+)[-._]?([0-9]*)")
_TIMESTAMP = re.compile(Constants.TIMESTAMP_SNAPSHOT_PATTERN)

# Known qualifiers in ascending order; the release marker is the empty string.
ALPHA_RANK = 0
BETA_RANK = 1
MILESTONE_RANK = 2
RC_RANK = 3
SNAPSHOT_RANK = 4
RELEASE_RANK = 5
SP_RANK = 6
UNKNOWN_RANK = -1

QUALIFIER_RANKS = {
    "alpha": ALPHA_RANK,
    "beta": BETA_RANK,
    "milestone": MILESTONE_RANK,
    "rc": RC_RANK,
    "cr": RC_RANK,
    "snapshot": SNAPSHOT_RANK,
    "": RELEASE_RANK,
    "ga": RELEASE_RANK,
    "final": RELEASE_RANK,
    "release": RELEASE_RANK,
    "sp": SP_RANK,
}

# Single letter shorthands only count when a number follows ("b2", "m1").
QUALIFIER_ALIASES = {"a": "alpha", "b": "beta", "m": "milestone"}

RELEASE_SYNONYMS = frozenset(name for name, rank in QUALIFIER_RANKS.items() if rank == RELEASE_RANK)

QualifierKey = Tuple[int, int, str]


def is_integer(token: str) -> bool:
    """True when ``token`` is a non-empty run of ASCII digits."""
    return bool(_INTEGER.fullmatch(token))


def is_timestamp_snapshot(qualifier: str) -> bool:
    """True for deployed snapshot markers such as ``20240101.120000-3``."""
    return bool(_TIMESTAMP.fullmatch(qualifier))


def qualifier_rank(name: str, has_number: bool = False) -> int:
    """Rank of a lower-cased qualifier name in the ranking table."""
    if name in QUALIFIER_RANKS:
        return QUALIFIER_RANKS[name]
    if has_number and name in QUALIFIER_ALIASES:
        return QUALIFIER_RANKS[QUALIFIER_ALIASES[name]]
    return UNKNOWN_RANK


def qualifier_key(qualifier: Optional[str]) -> QualifierKey:
    """Return (rank, number, text) ordering a qualifier.

    Unknown qualifiers share UNKNOWN_RANK and fall back to lexical order on
    their lower-cased text.
    """
    if qualifier is None:
        return (RELEASE_RANK, 0, "")
    text = qualifier.lower()
    if is_timestamp_snapshot(text):
        return (SNAPSHOT_RANK, 0, text)
    match = _QUALIFIER_PARTS.fullmatch(text)
    if match is not None:
        name, number = match.group(1), match.group(2)
        rank = qualifier_rank(name, has_number=bool(number))
        if rank != UNKNOWN_RANK:
            if rank == RELEASE_RANK and not number:
                return (RELEASE_RANK, 0, "")
            return (rank, int(number) if number else 0, "")
    if text in QUALIFIER_RANKS:
        return (QUALIFIER_RANKS[text], 0, "")
    return (UNKNOWN_RANK, 0, text)


@dataclass(frozen=True)
class ArtifactVersion:
    """Structured view of a version string.

    ``components`` holds the explicit numeric components in order (major,
    minor, incremental, ...). A trailing ``-N`` becomes the build number,
    any other trailing text the qualifier.
    """

    raw: str
    components: Tuple[int, ...]
    build_number: int = 0
    qualifier: Optional[str] = None

    @classmethod
    def parse(cls, version: str) -> "ArtifactVersion":
        """Parse ``version``; never raises, odd input ends up in the qualifier."""
        text = version.strip()
        main, sep, tail = text.partition("-")
        build_number = 0
        qualifier: Optional[str] = None
        if sep:
            if is_integer(tail) and (len(tail) == 1 or not tail.startswith("0")):
                build_number = int(tail)
            else:
                qualifier = tail

        components: List[int] = []
        atoms = main.split(".") if main else []
        for index, atom in enumerate(atoms):
            if is_integer(atom):
                components.append(int(atom))
                continue
            rest = ".".join(atoms[index:])
            if qualifier is None:
                qualifier = rest if build_number == 0 else f"{rest}-{build_number}"
                build_number = 0
            else:
                qualifier = f"{rest}-{qualifier}"
            break
        return cls(raw=version, components=tuple(components), build_number=build_number, qualifier=qualifier)

    @property
    def major(self) -> int:
        return self._component(0)

    @property
    def minor(self) -> int:
        return self._component(1)

    @property
    def incremental(self) -> int:
        return self._component(2)

    def _component(self, index: int) -> int:
        return self.components[index] if len(self.components) > index else 0

    @property
    def is_snapshot(self) -> bool:
        if self.qualifier is None:
            return False
        return qualifier_key(self.qualifier)[0] == SNAPSHOT_RANK or self.qualifier.upper().endswith("SNAPSHOT")

    def __str__(self) -> str:
        return self.raw


def alpha_num_increment(token: str) -> str:
    """Return the next string of equal length, incrementing with carry.

    The rightmost alphanumeric character is incremented: digits 0-8 and
    letters A-Y / a-y step once and stop; 9, Z and z wrap to 0, A and a and
    carry to the next alphanumeric on the left. Other characters are kept
    and skipped by the carry.
    """
    chars = list(token)
    index = len(chars)
    while index > 0:
        index -= 1
        char = chars[index]
        if "0" <= char < "9" or "A" <= char < "Z" or "a" <= char < "z":
            chars[index] = chr(ord(char) + 1)
            break
        if char == "9":
            chars[index] = "0"
        elif char == "Z":
            chars[index] = "A"
        elif char == "z":
            chars[index] = "a"
    return "".join(chars)
