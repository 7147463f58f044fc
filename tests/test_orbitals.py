from __future__ import annotations

import sys
import unittest
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from motutor.chem.molecules import MOLECULES, OrderingClass, get_molecule, molecule_ids
from motutor.chem.orbitals import generate_orbitals, group_by_energy, total_capacity


def _levels(orbitals) -> dict[str, int]:
    return {orb.id: orb.energy_level for orb in orbitals}


class MoleculeCatalogTests(unittest.TestCase):
    def test_lookup_by_id(self) -> None:
        molecule = get_molecule("N2")
        self.assertEqual(molecule.total_electrons, 14)
        self.assertEqual(molecule.ordering, OrderingClass.MIXING)

    def test_enumeration_order(self) -> None:
        self.assertEqual(molecule_ids()[0], "O2")
        self.assertEqual(len(molecule_ids()), len(MOLECULES))

    def test_unknown_id_raises(self) -> None:
        with self.assertRaises(ValueError):
            get_molecule("Xe2")

    def test_templates_hold_every_species(self) -> None:
        for molecule in MOLECULES:
            with self.subTest(molecule=molecule.id):
                self.assertGreaterEqual(total_capacity(generate_orbitals(molecule.ordering)), molecule.total_electrons)


class OrbitalTemplateTests(unittest.TestCase):
    def test_lower_shells_shared(self) -> None:
        standard = generate_orbitals(OrderingClass.STANDARD)
        mixing = generate_orbitals(OrderingClass.MIXING)
        self.assertEqual([o.id for o in standard[:4]], ["s1", "s1*", "s2", "s2*"])
        self.assertEqual([o.id for o in mixing[:4]], ["s1", "s1*", "s2", "s2*"])
        self.assertEqual([o.energy_level for o in standard[:4]], [0, 1, 2, 3])

    def test_standard_ordering(self) -> None:
        levels = _levels(generate_orbitals("standard"))
        self.assertEqual(levels["s2p"], 4)
        self.assertEqual(levels["pi2p_a"], 5)
        self.assertEqual(levels["pi2p_b"], 5)
        self.assertEqual(levels["pi2p*_a"], 6)
        self.assertEqual(levels["s2p*"], 7)

    def test_mixing_ordering(self) -> None:
        levels = _levels(generate_orbitals("mixing"))
        self.assertEqual(levels["pi2p_a"], 4)
        self.assertEqual(levels["pi2p_b"], 4)
        self.assertEqual(levels["s2p"], 5)
        self.assertEqual(levels["pi2p*_b"], 6)
        self.assertEqual(levels["s2p*"], 7)

    def test_all_empty_with_capacity_two(self) -> None:
        for orb in generate_orbitals("mixing"):
            self.assertEqual(orb.electrons, 0)
            self.assertEqual(orb.capacity, 2)

    def test_fresh_copy_each_call(self) -> None:
        first = generate_orbitals("standard")
        first[0].electrons = 2
        second = generate_orbitals("standard")
        self.assertEqual(second[0].electrons, 0)
        self.assertIsNot(first[0], second[0])

    def test_unknown_ordering_raises(self) -> None:
        with self.assertRaises(ValueError):
            generate_orbitals("hybrid")

    def test_group_by_energy_ascending(self) -> None:
        groups = group_by_energy(generate_orbitals("standard"))
        self.assertEqual([level for level, _ in groups], list(range(8)))
        self.assertEqual([o.id for o in groups[5][1]], ["pi2p_a", "pi2p_b"])


if __name__ == "__main__":
    unittest.main()
