from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache


class OrderingClass(str, Enum):
    # O2/F2-like: sigma 2p sits below the pi 2p pair.
    STANDARD = "standard"
    # B2/C2/N2-like: s-p mixing pushes sigma 2p above the pi 2p pair.
    MIXING = "mixing"


@dataclass(frozen=True)
class Molecule:
    id: str
    formula: str
    name: str
    total_electrons: int
    ordering: OrderingClass


MOLECULES: tuple[Molecule, ...] = (
    Molecule("O2", "O₂", "Dioxygen", 16, OrderingClass.STANDARD),
    Molecule("O2+", "O₂⁺", "Dioxygenyl", 15, OrderingClass.STANDARD),
    Molecule("O2-", "O₂⁻", "Superoxide", 17, OrderingClass.STANDARD),
    Molecule("N2", "N₂", "Dinitrogen", 14, OrderingClass.MIXING),
    Molecule("N2+", "N₂⁺", "Dinitrogen Cation", 13, OrderingClass.MIXING),
    Molecule("N2-", "N₂⁻", "Dinitrogen Anion", 15, OrderingClass.MIXING),
    Molecule("C2", "C₂", "Dicarbon", 12, OrderingClass.MIXING),
    Molecule("B2", "B₂", "Diboron", 10, OrderingClass.MIXING),
    Molecule("He2", "He₂", "Dihelium (Hypothetical)", 4, OrderingClass.STANDARD),
)

DEFAULT_MOLECULE_ID = "O2"


@lru_cache(maxsize=1)
def _molecule_index() -> dict[str, Molecule]:
    return {molecule.id: molecule for molecule in MOLECULES}


def molecule_ids() -> list[str]:
    return [molecule.id for molecule in MOLECULES]


def get_molecule(molecule_id: str) -> Molecule:
    molecule = _molecule_index().get(str(molecule_id or "").strip())
    if molecule is None:
        raise ValueError(f"Unknown molecule '{molecule_id}'.")
    return molecule
