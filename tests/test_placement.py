from __future__ import annotations

import sys
import unittest
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from motutor.chem.configuration import CheckMode, FeedbackKind, Rule, ground_state
from motutor.chem.molecules import MOLECULES, get_molecule
from motutor.chem.orbitals import copy_orbitals, generate_orbitals
from motutor.chem.placement import CyclePolicy, PlacementSession


def _counts(session: PlacementSession) -> dict[str, int]:
    return {orb.id: orb.electrons for orb in session.orbitals}


class ToggleTests(unittest.TestCase):
    def test_add_electron_pushes_history(self) -> None:
        session = PlacementSession("He2")
        self.assertTrue(session.toggle("s1"))
        self.assertEqual(_counts(session)["s1"], 1)
        self.assertEqual(len(session.history), 1)
        self.assertEqual(session.remaining, 3)

    def test_unknown_orbital_is_ignored(self) -> None:
        session = PlacementSession("O2")
        self.assertFalse(session.toggle("d3"))
        self.assertEqual(session.history, [])
        self.assertIsNone(session.feedback)

    def test_reset_cycle(self) -> None:
        session = PlacementSession("O2", policy=CyclePolicy.RESET)
        seen = []
        for _ in range(3):
            session.toggle("s1")
            seen.append(_counts(session)["s1"])
        self.assertEqual(seen, [1, 2, 0])
        self.assertEqual(len(session.history), 3)

    def test_step_down_cycle(self) -> None:
        session = PlacementSession("O2", policy="step_down")
        seen = []
        for _ in range(4):
            session.toggle("s1")
            seen.append(_counts(session)["s1"])
        self.assertEqual(seen, [1, 2, 1, 2])

    def test_budget_exhausted_on_empty_orbital(self) -> None:
        session = PlacementSession("He2")
        for orb_id in ("s1", "s1", "s1*", "s1*"):
            session.toggle(orb_id)
        before = copy_orbitals(session.orbitals)
        history_len = len(session.history)
        self.assertFalse(session.toggle("s2"))
        self.assertEqual(session.orbitals, before)
        self.assertEqual(len(session.history), history_len)
        self.assertEqual(session.feedback.kind, FeedbackKind.ERROR)
        self.assertIn("4", session.feedback.message)

    def test_budget_exhausted_recycles_single_electron(self) -> None:
        for policy in CyclePolicy:
            with self.subTest(policy=policy):
                session = PlacementSession("He2", policy=policy)
                for orb_id in ("s1", "s1", "s1*", "s2"):
                    session.toggle(orb_id)
                self.assertEqual(session.remaining, 0)
                self.assertTrue(session.toggle("s2"))
                self.assertEqual(_counts(session)["s2"], 0)
                self.assertEqual(session.feedback.kind, FeedbackKind.WARNING)

    def test_state_change_clears_previous_notice(self) -> None:
        session = PlacementSession("He2")
        for orb_id in ("s1", "s1", "s1*", "s1*", "s2"):
            session.toggle(orb_id)
        self.assertIsNotNone(session.feedback)
        session.toggle("s1*")
        self.assertIsNone(session.feedback)

    def test_counts_stay_in_bounds_and_budget_holds(self) -> None:
        order = ["s1", "s2p", "pi2p_a", "s1*", "pi2p*_b", "s2", "s2*", "s2p*", "pi2p_b", "pi2p*_a"]
        for policy in CyclePolicy:
            session = PlacementSession("B2", policy=policy)
            for step in range(200):
                session.toggle(order[(step * 7) % len(order)])
                with self.subTest(policy=policy, step=step):
                    self.assertTrue(all(0 <= o.electrons <= o.capacity for o in session.orbitals))
                    self.assertLessEqual(session.electrons_placed, session.molecule.total_electrons)


class HistoryTests(unittest.TestCase):
    def test_undo_restores_exact_prior_state(self) -> None:
        session = PlacementSession("N2")
        session.auto_fill()
        for orb_id in ("s2p", "pi2p_a", "s1", "pi2p*_a"):
            before = copy_orbitals(session.orbitals)
            session.toggle(orb_id)
            session.undo()
            self.assertEqual(session.orbitals, before)

    def test_undo_empty_is_noop(self) -> None:
        session = PlacementSession("O2")
        self.assertFalse(session.undo())
        self.assertFalse(session.can_undo)

    def test_history_snapshots_are_independent(self) -> None:
        session = PlacementSession("O2")
        session.toggle("s1")
        session.toggle("s1")
        self.assertEqual(session.history[0][0].electrons, 0)
        self.assertEqual(session.history[1][0].electrons, 1)


class AutoFillTests(unittest.TestCase):
    def test_auto_fill_matches_ground_state(self) -> None:
        session = PlacementSession("O2")
        session.toggle("s2p*")
        session.auto_fill()
        self.assertEqual(session.orbitals, ground_state(get_molecule("O2")))
        self.assertEqual(session.stats.unpaired_electrons, 2)
        self.assertEqual(len(session.history), 2)

    def test_auto_fill_twice_is_identical(self) -> None:
        session = PlacementSession("C2")
        session.auto_fill()
        first = copy_orbitals(session.orbitals)
        session.auto_fill()
        self.assertEqual(session.orbitals, first)

    def test_auto_fill_can_be_undone(self) -> None:
        session = PlacementSession("C2")
        session.auto_fill()
        session.undo()
        self.assertEqual(session.electrons_placed, 0)


class SwitchMoleculeTests(unittest.TestCase):
    def test_switch_resets_everything(self) -> None:
        session = PlacementSession("O2")
        session.toggle("s1")
        session.check()
        session.switch_molecule(get_molecule("N2"))
        self.assertEqual(session.molecule.id, "N2")
        self.assertEqual(session.orbitals, generate_orbitals("mixing"))
        self.assertEqual(session.history, [])
        self.assertIsNone(session.feedback)

    def test_switch_to_same_molecule_is_idempotent(self) -> None:
        session = PlacementSession("O2")
        for _ in range(3):
            session.auto_fill()
            session.switch_molecule("O2")
            self.assertEqual(session.orbitals, generate_orbitals("standard"))
            self.assertFalse(session.can_undo)


class SessionCheckTests(unittest.TestCase):
    def test_check_sets_feedback_without_mutating(self) -> None:
        session = PlacementSession("B2")
        session.toggle("s1")
        before = copy_orbitals(session.orbitals)
        result = session.check()
        self.assertEqual(result.rule, Rule.ELECTRON_COUNT)
        self.assertEqual(session.feedback.kind, FeedbackKind.ERROR)
        self.assertEqual(session.orbitals, before)

    def test_check_modes_on_ground_state(self) -> None:
        for molecule in MOLECULES:
            for mode in CheckMode:
                with self.subTest(molecule=molecule.id, mode=mode):
                    session = PlacementSession(molecule, check_mode=mode)
                    session.auto_fill()
                    self.assertTrue(session.check().ok)
                    self.assertEqual(session.feedback.kind, FeedbackKind.SUCCESS)

    def test_hint_context_is_a_copy(self) -> None:
        session = PlacementSession("O2")
        session.auto_fill()
        context = session.hint_context()
        context.orbitals[0].electrons = 0
        self.assertEqual(session.orbitals[0].electrons, 2)
        self.assertEqual(context.stats.bond_order, 2)


if __name__ == "__main__":
    unittest.main()
