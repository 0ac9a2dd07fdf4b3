"""PySide6 helpers for showing a TMX file while its units load.

``TmxLoadWatcher`` turns the parser's background completion into Qt
signals; ``TranslationUnitTableModel`` is a read-only table over one
unit snapshot.  Requires the ``gui`` extra.
"""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import QAbstractTableModel, QModelIndex, QObject, Qt, Signal

from tmxreader.models import TmxHeader, TranslationUnit
from tmxreader.parser import TmxParser


class TmxLoadWatcher(QObject):
    """Emits ``units_loaded`` or ``load_failed`` when a parser finishes.

    Signals are emitted from the parser's background thread; Qt queues
    them to receivers living in other threads.
    """

    units_loaded = Signal(int)
    load_failed = Signal(str)

    def __init__(self, parser: TmxParser, parent: QObject | None = None):
        super().__init__(parent)
        self._parser = parser

    @property
    def parser(self) -> TmxParser:
        return self._parser

    def start(self) -> None:
        """Connect to the parser; emits at once if loading already ended."""
        self._parser.add_done_callback(self._on_done)

    def _on_done(self, parser: TmxParser) -> None:
        if parser.has_error:
            self.load_failed.emit(parser.error_message)
        else:
            self.units_loaded.emit(len(parser.translation_units))


class TranslationUnitTableModel(QAbstractTableModel):
    """Four read-only columns: Source, Target, Confirmation and Domain."""

    COLUMNS = ("Source", "Target", "Confirmation", "Domain")

    def __init__(self, parent=None):
        super().__init__(parent)
        self._header = TmxHeader()
        self._units: tuple[TranslationUnit, ...] = ()

    # ── Public API ──────────────────────────────────────────────

    @property
    def units(self) -> tuple[TranslationUnit, ...]:
        return self._units

    def set_snapshot(self, header: TmxHeader, units: tuple[TranslationUnit, ...]) -> None:
        """Replace the displayed header and units and refresh the view."""
        self.beginResetModel()
        self._header = header
        self._units = units
        self.endResetModel()

    def refresh_from(self, parser: TmxParser) -> None:
        self.set_snapshot(parser.header, parser.translation_units)

    def cell_text(self, row: int, col: int) -> str:
        unit = self._units[row]
        if col == 0:
            return unit.source_text
        if col == 1:
            return unit.target_text or ""
        if col == 2:
            return unit.confirmation_level.label
        return unit.domain

    # ── QAbstractTableModel overrides ───────────────────────────

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._units)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self.COLUMNS)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole) -> Any:
        if not index.isValid():
            return None
        if role in (Qt.DisplayRole, Qt.ToolTipRole):
            return self.cell_text(index.row(), index.column())
        return None

    def headerData(
        self, section: int, orientation: Qt.Orientation, role: int = Qt.DisplayRole
    ) -> Any:
        if role == Qt.DisplayRole:
            if orientation == Qt.Horizontal and 0 <= section < len(self.COLUMNS):
                label = self.COLUMNS[section]
                lang = ""
                if section == 0:
                    lang = self._header.source_language
                elif section == 1:
                    lang = self._header.target_language
                return f"{label} [{lang}]" if lang else label
            if orientation == Qt.Vertical:
                return str(section + 1)
        return None

    def flags(self, index: QModelIndex) -> Qt.ItemFlags:
        return Qt.ItemIsEnabled | Qt.ItemIsSelectable
