from __future__ import annotations

import sys

import qtawesome as qta
from PySide6 import QtCore, QtWidgets

from motutor.chem.challenge import grade_stability_order
from motutor.chem.configuration import FeedbackKind, format_bond_order
from motutor.chem.molecules import MOLECULES, get_molecule
from motutor.chem.placement import HintContext, PlacementSession
from motutor.hints import GeminiHintProvider, HintProvider, request_comparison_hint, request_configuration_hint
from motutor.pedagogy import lab_rules_html, molecule_notes_html
from motutor.settings import TutorSettings
from motutor.views.mo_diagram_view import MODiagramView

FEEDBACK_STYLES = {
    FeedbackKind.SUCCESS: "color: #15803d;",
    FeedbackKind.ERROR: "color: #b91c1c;",
    FeedbackKind.WARNING: "color: #b45309;",
    FeedbackKind.INFO: "color: #1d4ed8;",
}

CHALLENGE_SETS = {
    "Oxygen series": ["O2", "O2+", "O2-"],
    "Nitrogen series": ["N2", "N2+", "N2-"],
    "Second row": ["B2", "C2", "N2", "O2"],
}


# Hint threads still blocked in the provider when their tab closes. Held here until they finish.
_DETACHED_HINT_THREADS: list[tuple[QtCore.QThread, QtCore.QObject]] = []


def stop_hint_thread(thread: QtCore.QThread, worker: QtCore.QObject, wait_ms: int) -> bool:
    """Ask ``thread`` to quit; return False if it outlived ``wait_ms`` and was detached."""
    thread.quit()
    if thread.wait(wait_ms):
        return True
    thread.setParent(None)
    entry = (thread, worker)
    _DETACHED_HINT_THREADS.append(entry)
    thread.finished.connect(lambda: _DETACHED_HINT_THREADS.remove(entry))
    return False


class HintWorker(QtCore.QObject):
    finished = QtCore.Signal(str)

    def __init__(
        self,
        provider: HintProvider,
        timeout: float,
        context: HintContext | None = None,
        formulas: list[str] | None = None,
    ) -> None:
        super().__init__()
        self._provider = provider
        self._timeout = timeout
        self._context = context
        self._formulas = formulas or []

    @QtCore.Slot()
    def run(self) -> None:
        if self._context is not None:
            text = request_configuration_hint(self._provider, self._context, self._timeout)
        else:
            text = request_comparison_hint(self._provider, self._formulas, self._timeout)
        self.finished.emit(text)


class MODiagramTab(QtWidgets.QWidget):
    """Tab for filling a molecular orbital diagram one electron at a time."""

    molecule_changed = QtCore.Signal(str)

    def __init__(
        self,
        settings: TutorSettings | None = None,
        provider: HintProvider | None = None,
        parent: QtWidgets.QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.settings = settings or TutorSettings()
        self.provider = provider or GeminiHintProvider(
            api_key=self.settings.api_key,
            model=self.settings.hint_model,
            temperature=self.settings.hint_temperature,
        )
        self.session = PlacementSession(
            self.settings.last_molecule,
            policy=self.settings.cycle_policy,
            check_mode=self.settings.check_mode,
        )
        self._hint_thread: QtCore.QThread | None = None
        self._hint_worker: HintWorker | None = None

        self.diagram = MODiagramView()
        self.diagram.orbital_clicked.connect(self._on_orbital_clicked)

        self.controls = self._build_controls()

        layout = QtWidgets.QHBoxLayout(self)
        layout.addWidget(self.controls, 2)
        layout.addWidget(self.diagram, 5)

        self._refresh()

    def _build_controls(self) -> QtWidgets.QWidget:
        container = QtWidgets.QWidget()
        layout = QtWidgets.QVBoxLayout(container)

        species_group = QtWidgets.QGroupBox("Select species")
        species_layout = QtWidgets.QVBoxLayout(species_group)
        self.molecule_combo = QtWidgets.QComboBox()
        for molecule in MOLECULES:
            self.molecule_combo.addItem(f"{molecule.formula} — {molecule.name}", userData=molecule.id)
        index = self.molecule_combo.findData(self.session.molecule.id)
        self.molecule_combo.setCurrentIndex(max(0, index))
        self.molecule_combo.currentIndexChanged.connect(self._on_molecule_change)
        species_layout.addWidget(self.molecule_combo)
        layout.addWidget(species_group)

        stats_group = QtWidgets.QGroupBox("Stability analysis")
        stats_layout = QtWidgets.QFormLayout(stats_group)
        self.total_label = QtWidgets.QLabel()
        self.placed_label = QtWidgets.QLabel()
        self.bond_order_label = QtWidgets.QLabel()
        self.formula_label = QtWidgets.QLabel()
        self.magnetism_label = QtWidgets.QLabel()
        self.stability_label = QtWidgets.QLabel()
        stats_layout.addRow("Total e⁻", self.total_label)
        stats_layout.addRow("Placed", self.placed_label)
        stats_layout.addRow("Bond order", self.bond_order_label)
        stats_layout.addRow("", self.formula_label)
        stats_layout.addRow("Property", self.magnetism_label)
        stats_layout.addRow("Stability", self.stability_label)
        layout.addWidget(stats_group)

        actions = QtWidgets.QGridLayout()
        self.undo_btn = QtWidgets.QPushButton("Undo")
        self.undo_btn.setIcon(qta.icon("fa5s.undo"))
        self.undo_btn.clicked.connect(self._undo)
        self.autofill_btn = QtWidgets.QPushButton("Auto-Fill")
        self.autofill_btn.setIcon(qta.icon("fa5s.bolt"))
        self.autofill_btn.clicked.connect(self._auto_fill)
        self.hint_btn = QtWidgets.QPushButton("Hint")
        self.hint_btn.setIcon(qta.icon("fa5s.lightbulb"))
        self.hint_btn.clicked.connect(self._request_hint)
        self.check_btn = QtWidgets.QPushButton("Check")
        self.check_btn.setIcon(qta.icon("fa5s.check-circle"))
        self.check_btn.clicked.connect(self._check)
        actions.addWidget(self.undo_btn, 0, 0)
        actions.addWidget(self.autofill_btn, 0, 1)
        actions.addWidget(self.hint_btn, 1, 0)
        actions.addWidget(self.check_btn, 1, 1)
        layout.addLayout(actions)

        self.feedback_label = QtWidgets.QLabel()
        self.feedback_label.setWordWrap(True)
        layout.addWidget(self.feedback_label)

        challenge_group = QtWidgets.QGroupBox("Stability challenge")
        challenge_layout = QtWidgets.QVBoxLayout(challenge_group)
        self.challenge_combo = QtWidgets.QComboBox()
        self.challenge_combo.addItems(list(CHALLENGE_SETS))
        self.challenge_combo.currentTextChanged.connect(self._load_challenge)
        challenge_layout.addWidget(self.challenge_combo)
        challenge_layout.addWidget(QtWidgets.QLabel("Drag to order from most to least stable:"))
        self.challenge_list = QtWidgets.QListWidget()
        self.challenge_list.setDragDropMode(QtWidgets.QAbstractItemView.DragDropMode.InternalMove)
        self.challenge_list.setMaximumHeight(120)
        challenge_layout.addWidget(self.challenge_list)
        challenge_buttons = QtWidgets.QHBoxLayout()
        self.challenge_check_btn = QtWidgets.QPushButton("Check order")
        self.challenge_check_btn.clicked.connect(self._check_challenge)
        self.challenge_hint_btn = QtWidgets.QPushButton("Hint")
        self.challenge_hint_btn.clicked.connect(self._request_comparison_hint)
        challenge_buttons.addWidget(self.challenge_check_btn)
        challenge_buttons.addWidget(self.challenge_hint_btn)
        challenge_layout.addLayout(challenge_buttons)
        layout.addWidget(challenge_group)
        self._load_challenge(self.challenge_combo.currentText())

        self.notes_view = QtWidgets.QTextBrowser()
        self.notes_view.setOpenExternalLinks(True)
        layout.addWidget(self.notes_view, 1)

        return container

    def _on_molecule_change(self) -> None:
        molecule_id = self.molecule_combo.currentData()
        if not molecule_id:
            return
        self.session.switch_molecule(get_molecule(molecule_id))
        self.settings.last_molecule = molecule_id
        self.molecule_changed.emit(molecule_id)
        self._refresh()

    def _on_orbital_clicked(self, orbital_id: str) -> None:
        self.session.toggle(orbital_id)
        self._refresh()

    def _undo(self) -> None:
        self.session.undo()
        self._refresh()

    def _auto_fill(self) -> None:
        self.session.auto_fill()
        self._refresh()

    def _check(self) -> None:
        self.session.check()
        self._refresh()

    def _start_hint(self, worker: HintWorker) -> None:
        if self._hint_thread is not None:
            return
        self.hint_btn.setEnabled(False)
        self.challenge_hint_btn.setEnabled(False)
        self._show_message(FeedbackKind.INFO, "Asking the tutor for a hint...")
        thread = QtCore.QThread(self)
        worker.moveToThread(thread)
        thread.started.connect(worker.run)
        worker.finished.connect(self._on_hint_ready)
        worker.finished.connect(thread.quit)
        thread.finished.connect(self._on_hint_thread_finished)
        self._hint_thread = thread
        self._hint_worker = worker
        thread.start()

    def _request_hint(self) -> None:
        self._start_hint(HintWorker(self.provider, self.settings.hint_timeout_s, context=self.session.hint_context()))

    def _request_comparison_hint(self) -> None:
        formulas = [get_molecule(mid).formula for mid in self._challenge_order()]
        self._start_hint(HintWorker(self.provider, self.settings.hint_timeout_s, formulas=formulas))

    @QtCore.Slot(str)
    def _on_hint_ready(self, text: str) -> None:
        self.session.clear_feedback()
        self._show_message(FeedbackKind.INFO, text)

    def _on_hint_thread_finished(self) -> None:
        if self._hint_worker is not None:
            self._hint_worker.deleteLater()
        if self._hint_thread is not None:
            self._hint_thread.deleteLater()
        self._hint_worker = None
        self._hint_thread = None
        self.hint_btn.setEnabled(True)
        self.challenge_hint_btn.setEnabled(True)

    def _load_challenge(self, name: str) -> None:
        self.challenge_list.clear()
        for molecule_id in CHALLENGE_SETS.get(name, []):
            item = QtWidgets.QListWidgetItem(get_molecule(molecule_id).formula)
            item.setData(QtCore.Qt.ItemDataRole.UserRole, molecule_id)
            self.challenge_list.addItem(item)

    def _challenge_order(self) -> list[str]:
        return [
            self.challenge_list.item(row).data(QtCore.Qt.ItemDataRole.UserRole)
            for row in range(self.challenge_list.count())
        ]

    def _check_challenge(self) -> None:
        result = grade_stability_order(self._challenge_order())
        self._show_message(FeedbackKind.SUCCESS if result.ok else FeedbackKind.ERROR, result.message)

    def _show_message(self, kind: FeedbackKind, message: str) -> None:
        self.feedback_label.setStyleSheet(FEEDBACK_STYLES.get(kind, ""))
        self.feedback_label.setText(message)

    def _refresh(self) -> None:
        session = self.session
        molecule = session.molecule
        stats = session.stats
        self.total_label.setText(str(molecule.total_electrons))
        self.placed_label.setText(str(stats.electrons_placed))
        self.bond_order_label.setText(format_bond_order(stats.bond_order))
        self.formula_label.setText(
            f"½ ({stats.bonding_electrons} bonding − {stats.antibonding_electrons} antibonding)"
        )
        self.magnetism_label.setText(stats.magnetism)
        self.stability_label.setText(stats.stability.label)
        self.undo_btn.setEnabled(session.can_undo)
        if session.feedback is not None:
            self._show_message(session.feedback.kind, session.feedback.message)
        else:
            self.feedback_label.clear()
        self.diagram.set_orbitals(session.orbitals, f"{molecule.formula} — {molecule.name}")
        self.notes_view.setHtml(molecule_notes_html(molecule.id) + lab_rules_html())

    def cleanup(self) -> None:
        if self._hint_thread is None or self._hint_worker is None:
            return
        wait_ms = int(self.settings.hint_timeout_s * 1000) + 500
        try:
            if not stop_hint_thread(self._hint_thread, self._hint_worker, wait_ms):
                print("Hint thread still running at shutdown; detached it.", file=sys.stderr)
        except Exception as exc:
            print(f"Hint thread shutdown error: {exc}", file=sys.stderr)
