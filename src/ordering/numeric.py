"""Dot-separated numeric comparison strategy."""

from __future__ import annotations

from typing import List, Optional, Tuple

from .base import VersionComparator, sign
from .tokens import alpha_num_increment, is_integer


def _atoms(version: str) -> List[str]:
    return [atom for atom in version.strip().split(".") if atom]


def _split_atom(atom: str) -> Tuple[str, Optional[str]]:
    body, sep, qualifier = atom.partition("-")
    return body, (qualifier if sep else None)


def _compare_text(a: str, b: str) -> int:
    return (a > b) - (a < b)


def _compare_bodies(a: str, b: str) -> int:
    if is_integer(a) and is_integer(b):
        return sign(int(a) - int(b))
    return _compare_text(a, b)


def _extra_atoms_sign(extra: List[str]) -> int:
    """Sign for the longer version, judged only by the atoms it adds."""
    for atom in extra:
        if not is_integer(atom) or int(atom) != 0:
            return 1
    # only zeros: the shorter version wins
    return -1


class NumericVersionComparator(VersionComparator):
    """Compares dot-separated atoms, numerically where both atoms are integers.

    An atom may carry a ``-qualifier`` tail; with equal bodies the atom
    without a qualifier is newer. Extra trailing zero atoms make a version
    older, so ``1`` sorts above ``1.0``.
    """

    name = "numeric"

    def compare(self, a: str, b: str) -> int:
        atoms_a = _atoms(a)
        atoms_b = _atoms(b)
        for atom_a, atom_b in zip(atoms_a, atoms_b):
            body_a, qualifier_a = _split_atom(atom_a)
            body_b, qualifier_b = _split_atom(atom_b)
            result = _compare_bodies(body_a, body_b)
            if result:
                return result
            if qualifier_a is None and qualifier_b is not None:
                return 1
            if qualifier_a is not None and qualifier_b is None:
                return -1
            if qualifier_a is not None and qualifier_b is not None:
                result = _compare_text(qualifier_a, qualifier_b)
                if result:
                    return result

        common = min(len(atoms_a), len(atoms_b))
        if len(atoms_a) > common:
            return _extra_atoms_sign(atoms_a[common:])
        if len(atoms_b) > common:
            return -_extra_atoms_sign(atoms_b[common:])
        return 0

    def segment_count(self, version: str) -> int:
        return len(_atoms(version))

    def increment_segment(self, version: str, segment: int) -> str:
        self._check_segment(version, segment)
        atoms = _atoms(version)
        body, _ = _split_atom(atoms[segment])
        if is_integer(body):
            atoms[segment] = str(int(body) + 1)
        else:
            atoms[segment] = alpha_num_increment(body)
        for index in range(segment + 1, len(atoms)):
            atoms[index] = "0"
        return ".".join(atoms)
