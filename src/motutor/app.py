from __future__ import annotations

import sys

from PySide6 import QtWidgets

from motutor.chem.molecules import get_molecule
from motutor.settings import TutorSettings, load_settings, open_settings, save_settings
from motutor.tabs.mo_diagram_tab import MODiagramTab


class MOTutorWindow(QtWidgets.QMainWindow):
    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle("MOTutor")
        self.setMinimumSize(1100, 720)
        self._store = open_settings()
        self.settings: TutorSettings = load_settings(self._store)

        self.tabs = QtWidgets.QTabWidget()
        self.diagram_tab = MODiagramTab(self.settings)
        self.diagram_tab.molecule_changed.connect(self._on_molecule_changed)
        self.tabs.addTab(self.diagram_tab, "MO Diagram")
        self.setCentralWidget(self.tabs)

        self.statusBar().showMessage("Click an orbital to add an electron. Click a full orbital to take electrons back.")

    def _on_molecule_changed(self, molecule_id: str) -> None:
        molecule = get_molecule(molecule_id)
        self.statusBar().showMessage(f"Place {molecule.total_electrons} electrons for {molecule.formula}.")

    def closeEvent(self, event) -> None:
        for index in range(self.tabs.count()):
            tab = self.tabs.widget(index)
            cleanup = getattr(tab, "cleanup", None)
            if callable(cleanup):
                cleanup()
        try:
            save_settings(self.settings, self._store)
        except Exception as exc:
            print(f"Settings save error: {exc}", file=sys.stderr)
        super().closeEvent(event)


def main() -> None:
    app = QtWidgets.QApplication(sys.argv)
    app.setStyle("Fusion")
    window = MOTutorWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
