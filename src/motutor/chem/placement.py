from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from motutor.chem.configuration import (
    CheckMode,
    CheckResult,
    Feedback,
    FeedbackKind,
    MOStats,
    check,
    ground_state,
    summarize,
)
from motutor.chem.molecules import Molecule, get_molecule
from motutor.chem.orbitals import Orbital, copy_orbitals, find_orbital, generate_orbitals


class CyclePolicy(str, Enum):
    # 0 -> 1 -> 2 -> 0; a singly occupied orbital is recycled to 0 once the budget is spent.
    RESET = "reset"
    # 0 -> 1 -> 2 -> 1 -> 0; electrons come back out one at a time.
    STEP_DOWN = "step_down"


@dataclass(frozen=True)
class HintContext:
    molecule: Molecule
    orbitals: list[Orbital]
    stats: MOStats


class PlacementSession:
    """Owns the orbitals being filled for one molecule plus their undo history.

    The remaining electron budget is always derived from the orbitals, never
    stored. Every mutation builds a fresh copy of the orbitals and moves the
    previous list onto the history, so snapshots are never shared with the
    current state.
    """

    def __init__(
        self,
        molecule: Molecule | str,
        policy: CyclePolicy | str = CyclePolicy.RESET,
        check_mode: CheckMode | str = CheckMode.RULES,
    ) -> None:
        self.policy = CyclePolicy(policy)
        self.check_mode = CheckMode(check_mode)
        self.molecule: Molecule = get_molecule(molecule) if isinstance(molecule, str) else molecule
        self.orbitals: list[Orbital] = generate_orbitals(self.molecule.ordering)
        self.history: list[list[Orbital]] = []
        self.feedback: Feedback | None = None

    @property
    def electrons_placed(self) -> int:
        return sum(orb.electrons for orb in self.orbitals)

    @property
    def remaining(self) -> int:
        return self.molecule.total_electrons - self.electrons_placed

    @property
    def can_undo(self) -> bool:
        return bool(self.history)

    @property
    def stats(self) -> MOStats:
        return summarize(self.orbitals)

    def clear_feedback(self) -> None:
        self.feedback = None

    def _commit(self, orbitals: list[Orbital], feedback: Feedback | None = None) -> None:
        self.history.append(self.orbitals)
        self.orbitals = orbitals
        self.feedback = feedback

    def toggle(self, orbital_id: str) -> bool:
        """Cycle the electron count of one orbital; return True if the orbitals changed."""
        index = find_orbital(self.orbitals, orbital_id)
        if index == -1:
            return False

        current = self.orbitals[index]
        updated = copy_orbitals(self.orbitals)
        target = updated[index]

        if current.is_full:
            target.electrons = 0 if self.policy is CyclePolicy.RESET else current.electrons - 1
            self._commit(updated)
            return True

        if self.remaining > 0:
            target.electrons = current.electrons + 1
            self._commit(updated)
            return True

        if current.electrons == 0:
            self.feedback = Feedback(
                FeedbackKind.ERROR,
                f"All {self.molecule.total_electrons} electrons are already placed.",
            )
            return False

        target.electrons = 0 if self.policy is CyclePolicy.RESET else current.electrons - 1
        self._commit(
            updated,
            Feedback(
                FeedbackKind.WARNING,
                f"All {self.molecule.total_electrons} electrons are already placed, "
                f"so the electron in {current.label} was taken back.",
            ),
        )
        return True

    def undo(self) -> bool:
        if not self.history:
            return False
        self.orbitals = self.history.pop()
        self.feedback = None
        return True

    def auto_fill(self) -> None:
        self._commit(
            ground_state(self.molecule, self.orbitals),
            Feedback(FeedbackKind.INFO, f"Filled the ground state for {self.molecule.formula}."),
        )

    def switch_molecule(self, molecule: Molecule | str) -> None:
        self.molecule = get_molecule(molecule) if isinstance(molecule, str) else molecule
        self.orbitals = generate_orbitals(self.molecule.ordering)
        self.history.clear()
        self.feedback = None

    def check(self, mode: CheckMode | str | None = None) -> CheckResult:
        result = check(self.molecule, self.orbitals, self.check_mode if mode is None else mode)
        self.feedback = result.feedback()
        return result

    def hint_context(self) -> HintContext:
        return HintContext(
            molecule=self.molecule,
            orbitals=copy_orbitals(self.orbitals),
            stats=self.stats,
        )
