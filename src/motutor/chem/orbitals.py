from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from motutor.chem.molecules import OrderingClass

ORBITAL_CAPACITY = 2


class OrbitalCharacter(str, Enum):
    BONDING = "bonding"
    ANTIBONDING = "antibonding"
    NONBONDING = "nonbonding"


@dataclass
class Orbital:
    id: str
    label: str
    energy_level: int
    character: OrbitalCharacter
    family: str
    capacity: int = ORBITAL_CAPACITY
    electrons: int = 0

    @property
    def is_full(self) -> bool:
        return self.electrons >= self.capacity


# (id, label, character, family)
_LOWER_SHELLS: tuple[tuple[str, str, OrbitalCharacter, str], ...] = (
    ("s1", "σ1s", OrbitalCharacter.BONDING, "1s"),
    ("s1*", "σ*1s", OrbitalCharacter.ANTIBONDING, "1s"),
    ("s2", "σ2s", OrbitalCharacter.BONDING, "2s"),
    ("s2*", "σ*2s", OrbitalCharacter.ANTIBONDING, "2s"),
)

_SIGMA_2P = ("s2p", "σ2p", OrbitalCharacter.BONDING, "2p")
_PI_2P = (
    ("pi2p_a", "π2p", OrbitalCharacter.BONDING, "2p"),
    ("pi2p_b", "π2p", OrbitalCharacter.BONDING, "2p"),
)
_PI_STAR_2P = (
    ("pi2p*_a", "π*2p", OrbitalCharacter.ANTIBONDING, "2p"),
    ("pi2p*_b", "π*2p", OrbitalCharacter.ANTIBONDING, "2p"),
)
_SIGMA_STAR_2P = ("s2p*", "σ*2p", OrbitalCharacter.ANTIBONDING, "2p")

# Energy-ranked groups of the 2p-derived shell; degenerate orbitals share a group.
_UPPER_SHELLS: dict[OrderingClass, tuple[tuple[tuple[str, str, OrbitalCharacter, str], ...], ...]] = {
    OrderingClass.STANDARD: ((_SIGMA_2P,), _PI_2P, _PI_STAR_2P, (_SIGMA_STAR_2P,)),
    OrderingClass.MIXING: (_PI_2P, (_SIGMA_2P,), _PI_STAR_2P, (_SIGMA_STAR_2P,)),
}


def _coerce_ordering(ordering: OrderingClass | str) -> OrderingClass:
    try:
        return OrderingClass(ordering)
    except ValueError:
        raise ValueError(f"Unknown ordering class '{ordering}'.") from None


def generate_orbitals(ordering: OrderingClass | str) -> list[Orbital]:
    """Return a fresh, empty orbital set for the given ordering class.

    Ranks 0-3 hold the 1s/2s-derived orbitals shared by both classes; ranks 4-7
    hold the 2p-derived orbitals whose order depends on s-p mixing.
    """
    ordering = _coerce_ordering(ordering)
    orbitals = [
        Orbital(id=orb_id, label=label, energy_level=rank, character=character, family=family)
        for rank, (orb_id, label, character, family) in enumerate(_LOWER_SHELLS)
    ]
    base_rank = len(_LOWER_SHELLS)
    for offset, group in enumerate(_UPPER_SHELLS[ordering]):
        for orb_id, label, character, family in group:
            orbitals.append(
                Orbital(
                    id=orb_id,
                    label=label,
                    energy_level=base_rank + offset,
                    character=character,
                    family=family,
                )
            )
    return orbitals


def copy_orbitals(orbitals: list[Orbital]) -> list[Orbital]:
    return [replace(orb) for orb in orbitals]


def group_by_energy(orbitals: list[Orbital]) -> list[tuple[int, list[Orbital]]]:
    groups: dict[int, list[Orbital]] = {}
    for orb in orbitals:
        groups.setdefault(orb.energy_level, []).append(orb)
    return [(level, groups[level]) for level in sorted(groups)]


def total_capacity(orbitals: list[Orbital]) -> int:
    return sum(orb.capacity for orb in orbitals)


def find_orbital(orbitals: list[Orbital], orbital_id: str) -> int:
    for index, orb in enumerate(orbitals):
        if orb.id == orbital_id:
            return index
    return -1
