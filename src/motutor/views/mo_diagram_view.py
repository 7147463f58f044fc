from __future__ import annotations

import numpy as np
from PySide6 import QtCore, QtGui, QtWidgets

from motutor.chem.orbitals import Orbital, OrbitalCharacter, group_by_energy

CHARACTER_COLORS = {
    OrbitalCharacter.BONDING: "#22c55e",
    OrbitalCharacter.ANTIBONDING: "#ef4444",
    OrbitalCharacter.NONBONDING: "#94a3b8",
}


def layout_orbitals(
    orbitals: list[Orbital],
    width: float,
    height: float,
    margin: float = 40.0,
    box_w: float = 56.0,
    spacing: float = 18.0,
) -> dict[str, QtCore.QRectF]:
    """Map each orbital id to its slot rectangle; energy runs bottom to top."""
    groups = group_by_energy(orbitals)
    if not groups:
        return {}
    levels = np.array([level for level, _group in groups], dtype=float)
    top, bottom = margin, max(margin + 1.0, height - margin)
    if levels.size == 1:
        ys = np.array([(top + bottom) / 2.0])
    else:
        ys = np.interp(levels, [levels.min(), levels.max()], [bottom, top])
    box_h = float(np.clip((bottom - top) / max(len(groups), 1) * 0.55, 18.0, 40.0))
    center_x = width / 2.0 + margin / 2.0
    rects: dict[str, QtCore.QRectF] = {}
    for y, (_level, group) in zip(ys, groups):
        count = len(group)
        offsets = (np.arange(count) - (count - 1) / 2.0) * (box_w + spacing)
        for orb, dx in zip(group, offsets):
            rects[orb.id] = QtCore.QRectF(center_x + dx - box_w / 2.0, y - box_h / 2.0, box_w, box_h)
    return rects


class MODiagramView(QtWidgets.QWidget):
    orbital_clicked = QtCore.Signal(str)

    def __init__(self, parent: QtWidgets.QWidget | None = None) -> None:
        super().__init__(parent)
        self.orbitals: list[Orbital] = []
        self.title = ""
        self._rects: dict[str, QtCore.QRectF] = {}
        self.setSizePolicy(QtWidgets.QSizePolicy.Policy.Expanding, QtWidgets.QSizePolicy.Policy.Expanding)
        self.setMinimumSize(360, 420)
        self.setMouseTracking(True)

    def set_orbitals(self, orbitals: list[Orbital], title: str = "") -> None:
        self.orbitals = list(orbitals)
        self.title = title
        self.update()

    def _orbital_at(self, pos: QtCore.QPointF) -> str | None:
        for orb_id, rect in self._rects.items():
            if rect.contains(pos):
                return orb_id
        return None

    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:
        if event.button() == QtCore.Qt.MouseButton.LeftButton:
            orb_id = self._orbital_at(event.position())
            if orb_id:
                self.orbital_clicked.emit(orb_id)
                return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:
        hovering = self._orbital_at(event.position()) is not None
        self.setCursor(QtCore.Qt.CursorShape.PointingHandCursor if hovering else QtCore.Qt.CursorShape.ArrowCursor)
        super().mouseMoveEvent(event)

    def paintEvent(self, event) -> None:
        painter = QtGui.QPainter(self)
        if not painter.isActive():
            return
        try:
            painter.fillRect(self.rect(), QtGui.QColor("#0b1320"))
            painter.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing, True)
            self._rects = layout_orbitals(self.orbitals, float(self.width()), float(self.height()))
            self._draw_energy_axis(painter)
            if self.title:
                painter.setPen(QtGui.QPen(QtGui.QColor("#e5e7eb")))
                painter.drawText(QtCore.QPointF(48.0, 22.0), self.title)
            for orb in self.orbitals:
                rect = self._rects.get(orb.id)
                if rect is not None:
                    self._draw_orbital(painter, orb, rect)
        finally:
            painter.end()

    def _draw_energy_axis(self, painter: QtGui.QPainter) -> None:
        arrow_x = 24.0
        arrow_top = 30.0
        arrow_bottom = self.height() - 30.0
        painter.setPen(QtGui.QPen(QtGui.QColor("#e5e7eb"), 2))
        painter.drawLine(QtCore.QPointF(arrow_x, arrow_bottom), QtCore.QPointF(arrow_x, arrow_top + 12))
        head = QtGui.QPolygonF(
            [
                QtCore.QPointF(arrow_x, arrow_top),
                QtCore.QPointF(arrow_x - 6, arrow_top + 12),
                QtCore.QPointF(arrow_x + 6, arrow_top + 12),
            ]
        )
        painter.setBrush(QtGui.QBrush(QtGui.QColor("#e5e7eb")))
        painter.drawPolygon(head)
        painter.save()
        painter.translate(arrow_x - 8, (arrow_top + arrow_bottom) / 2)
        painter.rotate(-90)
        painter.drawText(QtCore.QPointF(-24, 0), "Energy")
        painter.restore()

    def _draw_orbital(self, painter: QtGui.QPainter, orb: Orbital, rect: QtCore.QRectF) -> None:
        color = QtGui.QColor(CHARACTER_COLORS.get(orb.character, "#94a3b8"))
        painter.setPen(QtGui.QPen(color, 2))
        painter.setBrush(QtCore.Qt.BrushStyle.NoBrush)
        painter.drawRect(rect)
        painter.setPen(QtGui.QPen(QtGui.QColor("#e5e7eb")))
        painter.drawText(QtCore.QPointF(rect.right() + 6, rect.center().y() + 4), orb.label)
        arrows = ["↑", "↓"][: max(0, min(orb.capacity, orb.electrons))]
        font = painter.font()
        font.setPointSizeF(max(8.0, rect.height() * 0.45))
        painter.save()
        painter.setFont(font)
        for idx, arrow in enumerate(arrows):
            slot = QtCore.QRectF(rect.left() + idx * rect.width() / 2.0, rect.top(), rect.width() / 2.0, rect.height())
            painter.drawText(slot, QtCore.Qt.AlignmentFlag.AlignCenter, arrow)
        painter.restore()
