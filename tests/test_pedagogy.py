from __future__ import annotations

import sys
import unittest
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from motutor.chem.molecules import molecule_ids
from motutor.pedagogy import FALLBACK_NOTES, lab_rules_html, load_molecule_notes, molecule_notes_html


class MoleculeNotesTests(unittest.TestCase):
    def test_every_species_has_notes(self) -> None:
        notes = load_molecule_notes()
        for molecule_id in molecule_ids():
            self.assertIn(molecule_id, notes)

    def test_notes_html(self) -> None:
        html = molecule_notes_html("B2")
        self.assertIn("Diboron", html)
        self.assertIn("<li>", html)

    def test_missing_notes_fall_back(self) -> None:
        self.assertIn(FALLBACK_NOTES, molecule_notes_html("Li2"))

    def test_lab_rules(self) -> None:
        html = lab_rules_html()
        self.assertIn("Aufbau Principle", html)
        self.assertIn("Hund&#x27;s Rule", html)
        self.assertIn("Pauli Exclusion", html)


if __name__ == "__main__":
    unittest.main()
