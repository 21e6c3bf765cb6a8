"""Single-value substitution addressed by element path.

``set_value`` rewrites the text of one element located by its path from
the root, optionally disambiguated by sibling key elements, and only when
the current text still equals the expected old value.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from common.logging_utils import extra_context, is_debug_enabled
from versioning.models import KeyPairs, PatchTarget

from .document import ModifiedDocument, Path
from .tokenizer import TokenKind

logger = logging.getLogger(__name__)


class _ParentState:
    """Children seen so far inside one occurrence of the parent element."""

    def __init__(self):
        self.target: Optional[int] = None
        self.values: Dict[str, Optional[str]] = {}

    def matches(self, key: KeyPairs) -> bool:
        for name, expected in key:
            value = self.values.get(name)
            if value is None or value.strip() != expected.strip():
                return False
        return True


def find_targets(document: ModifiedDocument, path: Sequence[str], key: KeyPairs = ()) -> List[int]:
    """Token indexes of every element at ``path`` whose parent matches ``key``.

    Results are in document order; the first entry is the structural match
    used by :func:`set_value`.
    """
    path = tuple(path)
    parent_path: Path = path[:-1]
    leaf = path[-1]
    key_names = {name for name, _ in key}
    found: List[int] = []
    state = _ParentState() if not parent_path else None

    for index, token, element_path in document.walk():
        if state is None:
            if token.kind is TokenKind.START and element_path == parent_path:
                state = _ParentState()
            continue
        if parent_path and token.kind is TokenKind.END and element_path == parent_path:
            if state.target is not None and state.matches(key):
                found.append(state.target)
            state = None
            continue
        if token.kind in (TokenKind.START, TokenKind.EMPTY) and element_path[:-1] == parent_path:
            name = element_path[-1]
            if name == leaf and state.target is None:
                state.target = index
            if name in key_names and name not in state.values:
                state.values[name] = document.element_text(index)

    if state is not None and not parent_path and state.target is not None and state.matches(key):
        found.append(state.target)
    return found


def _replace_checked(document: ModifiedDocument, index: int, expected_old: str, new_value: str) -> bool:
    current = document.element_text(index)
    if current is None or current.strip() != expected_old.strip():
        if is_debug_enabled(logger):
            logger.debug(
                "Precondition failed",
                extra=extra_context(
                    event="decision", component="patcher", action="set_value",
                    outcome="stale_value", expected=expected_old, actual=current,
                ),
            )
        return False
    if current.strip() == new_value:
        return False
    document.replace_element_text(index, new_value)
    return True


def set_value(
    document: ModifiedDocument,
    path: Sequence[str],
    expected_old: str,
    new_value: str,
    key: Optional[Iterable[Tuple[str, str]]] = None,
) -> bool:
    """Replace the text at ``path`` when it still reads ``expected_old``.

    The first element matching the path (and key, when given) decides; a
    stale value there returns False and leaves the document untouched.
    """
    target = PatchTarget(tuple(path), expected_old, key or ())
    return apply_patch(document, target, new_value)


def apply_patch(document: ModifiedDocument, target: PatchTarget, new_value: str) -> bool:
    """Apply a PatchTarget; see :func:`set_value`."""
    indexes = find_targets(document, target.path, target.key)
    if not indexes:
        if is_debug_enabled(logger):
            logger.debug(
                "No element at path",
                extra=extra_context(
                    event="decision", component="patcher", action="set_value",
                    outcome="not_found", path="/".join(target.path),
                ),
            )
        return False
    return _replace_checked(document, indexes[0], target.expected_old, new_value)


def apply_patch_all(document: ModifiedDocument, target: PatchTarget, new_value: str) -> int:
    """Apply ``target`` to every matching occurrence; return how many changed.

    Occurrences are revisited by ordinal after each replacement since a
    replacement may change the number of tokens.
    """
    changed = 0
    ordinal = 0
    while True:
        indexes = find_targets(document, target.path, target.key)
        if ordinal >= len(indexes):
            return changed
        if _replace_checked(document, indexes[ordinal], target.expected_old, new_value):
            changed += 1
        ordinal += 1
