"""Extended ("mercury") comparison strategy.

Versions are split into items on ``.``, ``-`` and digit/letter transitions
and compared item by item. Unlike the default strategy a missing item sorts
below a zero, so ``1`` and ``1.0`` are different versions, while a missing
item still sorts above a pre-release qualifier (``1`` above ``1-SNAPSHOT``).
"""

from __future__ import annotations

import re
from itertools import zip_longest
from typing import List, Tuple

from .base import VersionComparator
from .tokens import RELEASE_RANK, RELEASE_SYNONYMS, alpha_num_increment, qualifier_rank

_ITEM = re.compile(r"[0-9]+|[A-Za-z]+")
_TIMESTAMP_TAIL = re.compile(r"-([0-9]{8}\.[0-9]{6}-[0-9]+)$")

# Item classes, ascending.
_PRE_RELEASE = 0
_MISSING = 1
_POST_RELEASE = 2
_NUMBER = 3

Item = Tuple[int, int, str]
MISSING_ITEM: Item = (_MISSING, 0, "")


def tokenize_items(version: str) -> List[Item]:
    """Return the comparable items of ``version``."""
    text = version.strip().lower()
    text = _TIMESTAMP_TAIL.sub(r"-snapshot.\1", text)
    tokens = _ITEM.findall(text)
    items: List[Item] = []
    for index, token in enumerate(tokens):
        if token.isdigit():
            items.append((_NUMBER, int(token), ""))
            continue
        if token in RELEASE_SYNONYMS:
            continue
        followed_by_number = index + 1 < len(tokens) and tokens[index + 1].isdigit()
        rank = qualifier_rank(token, has_number=followed_by_number)
        item_class = _POST_RELEASE if rank > RELEASE_RANK else _PRE_RELEASE
        items.append((item_class, rank, token))
    return items


class MercuryVersionComparator(VersionComparator):
    """Item-wise ordering for metadata-rich repositories."""

    name = "mercury"

    def compare(self, a: str, b: str) -> int:
        for item_a, item_b in zip_longest(tokenize_items(a), tokenize_items(b), fillvalue=MISSING_ITEM):
            if item_a != item_b:
                return 1 if item_a > item_b else -1
        return 0

    def segment_count(self, version: str) -> int:
        return len(_ITEM.findall(version))

    def increment_segment(self, version: str, segment: int) -> str:
        """Bump one token, zero the numbers after it and cut at the next qualifier."""
        self._check_segment(version, segment)
        matches = list(_ITEM.finditer(version))
        target = matches[segment]
        token = target.group()
        bumped = str(int(token) + 1) if token.isdigit() else alpha_num_increment(token)
        parts = [version[:target.start()], bumped]
        position = target.end()
        for match in matches[segment + 1:]:
            if not match.group().isdigit():
                break
            parts.append(version[position:match.start()])
            parts.append("0")
            position = match.end()
        return "".join(parts)
