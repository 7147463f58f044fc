from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from motutor.chem.molecules import Molecule
from motutor.chem.orbitals import (
    Orbital,
    OrbitalCharacter,
    copy_orbitals,
    generate_orbitals,
    group_by_energy,
)


class FeedbackKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Feedback:
    kind: FeedbackKind
    message: str


class StabilityTier(str, Enum):
    NONEXISTENT = "nonexistent/unstable"
    HIGHLY_UNSTABLE = "highly unstable"
    WEAK = "weak"
    STABLE = "stable"
    HIGHLY_STABLE = "highly stable"

    @property
    def label(self) -> str:
        return _TIER_LABELS[self]


_TIER_LABELS = {
    StabilityTier.NONEXISTENT: "Unstable / Does Not Exist",
    StabilityTier.HIGHLY_UNSTABLE: "Highly Unstable",
    StabilityTier.WEAK: "Weak Stability",
    StabilityTier.STABLE: "Stable",
    StabilityTier.HIGHLY_STABLE: "Highly Stable",
}


class Rule(str, Enum):
    ELECTRON_COUNT = "electron_count"
    AUFBAU = "aufbau"
    HUND = "hund"
    PAULI = "pauli"
    GROUND_STATE = "ground_state"


class CheckMode(str, Enum):
    RULES = "rules"
    EXACT = "exact"


@dataclass(frozen=True)
class MOStats:
    electrons_placed: int
    bonding_electrons: int
    antibonding_electrons: int
    bond_order: float
    unpaired_electrons: int
    is_paramagnetic: bool
    stability: StabilityTier

    @property
    def magnetism(self) -> str:
        return "Paramagnetic" if self.is_paramagnetic else "Diamagnetic"


@dataclass(frozen=True)
class CheckResult:
    ok: bool
    message: str
    formula: str
    bond_order: float
    rule: Rule | None = None
    expected: int | None = None
    actual: int | None = None
    energy_level: int | None = None
    orbital_id: str | None = None

    def feedback(self) -> Feedback:
        return Feedback(FeedbackKind.SUCCESS if self.ok else FeedbackKind.ERROR, self.message)


def stability_tier(bond_order: float) -> StabilityTier:
    # Upper bounds are inclusive except for the stable/highly stable split at 2.5.
    if bond_order <= 0:
        return StabilityTier.NONEXISTENT
    if bond_order <= 0.5:
        return StabilityTier.HIGHLY_UNSTABLE
    if bond_order <= 1.5:
        return StabilityTier.WEAK
    if bond_order < 2.5:
        return StabilityTier.STABLE
    return StabilityTier.HIGHLY_STABLE


def format_bond_order(bond_order: float) -> str:
    return f"{bond_order:g}"


def summarize(orbitals: list[Orbital]) -> MOStats:
    placed = sum(orb.electrons for orb in orbitals)
    bonding = sum(orb.electrons for orb in orbitals if orb.character == OrbitalCharacter.BONDING)
    antibonding = sum(orb.electrons for orb in orbitals if orb.character == OrbitalCharacter.ANTIBONDING)
    bond_order = max(0.0, (bonding - antibonding) / 2)
    unpaired = sum(1 for orb in orbitals if orb.electrons == 1)
    return MOStats(
        electrons_placed=placed,
        bonding_electrons=bonding,
        antibonding_electrons=antibonding,
        bond_order=bond_order,
        unpaired_electrons=unpaired,
        is_paramagnetic=unpaired > 0,
        stability=stability_tier(bond_order),
    )


def ground_state(molecule: Molecule, orbitals: list[Orbital] | None = None) -> list[Orbital]:
    """Return the Aufbau/Hund ground-state filling for ``molecule``.

    Energy groups are filled lowest first. Within a group every orbital gets one
    electron before any is paired, so degenerate pairs end up singly occupied
    whenever the budget runs out midway. The input list is never modified.
    """
    filled = generate_orbitals(molecule.ordering) if orbitals is None else copy_orbitals(orbitals)
    for orb in filled:
        orb.electrons = 0
    remaining = max(0, int(molecule.total_electrons))
    for _level, group in group_by_energy(filled):
        if remaining <= 0:
            break
        for orb in group:
            if remaining > 0 and orb.electrons < orb.capacity:
                orb.electrons += 1
                remaining -= 1
        for orb in group:
            if remaining > 0 and orb.electrons == 1 and orb.capacity > 1:
                orb.electrons += 1
                remaining -= 1
    return filled


def _success(molecule: Molecule, bond_order: float) -> CheckResult:
    return CheckResult(
        ok=True,
        message=(
            f"Correct! You've successfully configured the ground state for {molecule.formula}. "
            f"Bond order: {format_bond_order(bond_order)}."
        ),
        formula=molecule.formula,
        bond_order=bond_order,
    )


def _count_mismatch(molecule: Molecule, placed: int, bond_order: float) -> CheckResult | None:
    if placed == molecule.total_electrons:
        return None
    return CheckResult(
        ok=False,
        rule=Rule.ELECTRON_COUNT,
        message=(
            f"Incorrect electron count. {molecule.formula} needs {molecule.total_electrons}e⁻, "
            f"you placed {placed}."
        ),
        formula=molecule.formula,
        bond_order=bond_order,
        expected=molecule.total_electrons,
        actual=placed,
    )


def validate(molecule: Molecule, orbitals: list[Orbital]) -> CheckResult:
    """Check ``orbitals`` against electron count, Pauli, Aufbau and Hund, in that order."""
    stats = summarize(orbitals)
    mismatch = _count_mismatch(molecule, stats.electrons_placed, stats.bond_order)
    if mismatch is not None:
        return mismatch

    for orb in orbitals:
        if not 0 <= orb.electrons <= orb.capacity:
            return CheckResult(
                ok=False,
                rule=Rule.PAULI,
                message=f"Pauli Exclusion violated: {orb.label} can hold at most {orb.capacity} electrons.",
                formula=molecule.formula,
                bond_order=stats.bond_order,
                expected=orb.capacity,
                actual=orb.electrons,
                energy_level=orb.energy_level,
                orbital_id=orb.id,
            )

    groups = group_by_energy(orbitals)

    lower_full = True
    for level, group in groups:
        total = sum(orb.electrons for orb in group)
        if total > 0 and not lower_full:
            return CheckResult(
                ok=False,
                rule=Rule.AUFBAU,
                message="Aufbau Principle violated: Lower energy levels must be completely filled first.",
                formula=molecule.formula,
                bond_order=stats.bond_order,
                energy_level=level,
                orbital_id=group[0].id,
            )
        lower_full = lower_full and total == sum(orb.capacity for orb in group)

    for level, group in groups:
        paired = any(orb.electrons == 2 for orb in group)
        empty = next((orb for orb in group if orb.electrons == 0), None)
        if paired and empty is not None:
            return CheckResult(
                ok=False,
                rule=Rule.HUND,
                message="Hund's Rule violated: Degenerate orbitals must be occupied singly before pairing.",
                formula=molecule.formula,
                bond_order=stats.bond_order,
                energy_level=level,
                orbital_id=empty.id,
            )

    return _success(molecule, stats.bond_order)


def compare_to_ground_state(molecule: Molecule, orbitals: list[Orbital]) -> CheckResult:
    """Exact-match check: every orbital must hold what the ground state puts there."""
    stats = summarize(orbitals)
    mismatch = _count_mismatch(molecule, stats.electrons_placed, stats.bond_order)
    if mismatch is not None:
        return mismatch

    expected = {orb.id: orb.electrons for orb in ground_state(molecule, orbitals)}
    for orb in orbitals:
        want = expected.get(orb.id, 0)
        if orb.electrons != want:
            return CheckResult(
                ok=False,
                rule=Rule.GROUND_STATE,
                message=(
                    f"Not the ground state yet: {orb.label} should hold {want} "
                    f"electron{'s' if want != 1 else ''}, you placed {orb.electrons}."
                ),
                formula=molecule.formula,
                bond_order=stats.bond_order,
                expected=want,
                actual=orb.electrons,
                energy_level=orb.energy_level,
                orbital_id=orb.id,
            )
    return _success(molecule, stats.bond_order)


def check(molecule: Molecule, orbitals: list[Orbital], mode: CheckMode | str = CheckMode.RULES) -> CheckResult:
    if CheckMode(mode) is CheckMode.EXACT:
        return compare_to_ground_state(molecule, orbitals)
    return validate(molecule, orbitals)
