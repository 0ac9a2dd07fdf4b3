"""Tests for the PySide6 helpers."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

pytest.importorskip("PySide6")

from PySide6.QtCore import QCoreApplication, Qt  # noqa: E402

from tmxreader.parser import TmxParser  # noqa: E402
from tmxreader.qt import TmxLoadWatcher, TranslationUnitTableModel  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    return app


class TestWatcher:
    def test_units_loaded(self, qapp, small_tmx_path: Path):
        done = threading.Event()
        counts: list[int] = []

        def on_loaded(count: int) -> None:
            counts.append(count)
            done.set()

        watcher = TmxLoadWatcher(TmxParser(small_tmx_path, settings={}))
        watcher.units_loaded.connect(on_loaded, Qt.DirectConnection)
        watcher.start()
        assert done.wait(5)
        assert counts == [4]

    def test_load_failed(self, qapp, malformed_tmx_path: Path):
        messages: list[str] = []
        watcher = TmxLoadWatcher(TmxParser(malformed_tmx_path, settings={}))
        watcher.load_failed.connect(messages.append, Qt.DirectConnection)
        watcher.start()
        assert len(messages) == 1
        assert "malformed.tmx" in messages[0]


class TestTableModel:
    def test_rows_and_cells(self, qapp, small_parser: TmxParser):
        model = TranslationUnitTableModel()
        assert model.rowCount() == 0
        model.refresh_from(small_parser)
        assert model.rowCount() == 4
        assert model.columnCount() == 4
        assert model.data(model.index(0, 0)) == "Hello world"
        assert model.data(model.index(0, 1)) == "Hallo Welt"
        assert model.data(model.index(0, 2)) == "ApprovedSignOff"
        assert model.data(model.index(0, 3)) == "Legal"
        assert model.data(model.index(2, 1)) == ""

    def test_header_shows_languages(self, qapp, small_parser: TmxParser):
        model = TranslationUnitTableModel()
        model.refresh_from(small_parser)
        assert model.headerData(0, Qt.Horizontal) == "Source [en-US]"
        assert model.headerData(1, Qt.Horizontal) == "Target [de-DE]"
        assert model.headerData(2, Qt.Horizontal) == "Confirmation"
        assert model.headerData(0, Qt.Vertical) == "1"

    def test_read_only(self, qapp, small_parser: TmxParser):
        model = TranslationUnitTableModel()
        model.refresh_from(small_parser)
        assert not model.flags(model.index(0, 0)) & Qt.ItemIsEditable
