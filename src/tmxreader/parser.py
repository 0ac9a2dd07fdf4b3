"""Two-phase TMX loading.

Loading a file reads the whole document and builds the header before
the constructor returns; the translation units are built afterwards on
a background thread and published in one step.  Until then readers see
the previous (initially empty) unit snapshot.

Typical use::

    parser = TmxParser("memory.tmx")
    if parser.has_error:
        ...
    parser.header.source_language     # available immediately
    parser.wait_until_loaded()
    for unit in parser.translation_units:
        ...
"""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Any, Callable, Mapping

from lxml import etree

from tmxreader import config
from tmxreader.errors import LoadCancelledError, TmxError
from tmxreader.models import TmxHeader, TranslationUnit
from tmxreader.tmx_io import extract_header, extract_unit, iter_units, read_document

logger = logging.getLogger(__name__)


class TmxParser:
    """Reads one TMX file: header synchronously, units in the background.

    The header and unit snapshots are replaced whole under one lock and
    never mutated afterwards, so readers always see either the previous
    or the new complete value.
    """

    def __init__(
        self,
        file_path: str | Path,
        *,
        settings: Mapping[str, Any] | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._settings = settings
        self._file_path = Path(file_path)
        self._header = TmxHeader()
        self._units: tuple[TranslationUnit, ...] = ()
        self._error: BaseException | None = None
        self._error_message = ""
        self._future: Future[None] | None = None
        self._cancelled = threading.Event()
        self.load(file_path)

    # ── Lifecycle ───────────────────────────────────────────────

    def load(self, file_path: str | Path) -> None:
        """Read *file_path*, commit its header and start building its units.

        Failures never propagate: they set :attr:`has_error` and
        :attr:`error_message` and leave the header and units untouched.
        Waiters blocked in :meth:`wait_until_loaded` from the start of
        this call wait for this load, not the previous one.
        """
        # A previous background extraction must not publish over this load
        self._cancelled.set()
        cancelled = threading.Event()
        self._cancelled = cancelled
        done: Future[None] = Future()
        self._future = done
        self._file_path = Path(file_path)
        self._set_error(None)
        logger.debug("Loading %s", self._file_path)

        try:
            huge_tree = self._huge_tree()
        except ValueError as exc:
            self._fail(exc, message=f"Invalid reader settings: {exc}")
            done.set_result(None)
            return

        try:
            tree = read_document(self._file_path, huge_tree=huge_tree)
            header = extract_header(tree)
        except (TmxError, etree.LxmlError, OSError, ValueError) as exc:
            self._fail(exc)
            done.set_result(None)
            return

        with self._lock:
            self._header = header
        logger.debug(
            "Header committed for %s (%s -> %s)",
            self._file_path.name, header.source_language, header.target_language,
        )

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="tmx-units")
        try:
            executor.submit(self._run, tree, header, cancelled, done)
        finally:
            executor.shutdown(wait=False)

    def _run(
        self,
        tree: etree._ElementTree,
        header: TmxHeader,
        cancelled: threading.Event,
        done: Future[None],
    ) -> None:
        try:
            self._extract_units(tree, header, cancelled)
        except Exception as exc:
            # Handed to waiters, which re-raise it
            done.set_exception(exc)
        else:
            done.set_result(None)

    def _extract_units(
        self,
        tree: etree._ElementTree,
        header: TmxHeader,
        cancelled: threading.Event,
    ) -> None:
        units: list[TranslationUnit] = []
        try:
            for index, tu in enumerate(iter_units(tree), start=1):
                if cancelled.is_set():
                    raise LoadCancelledError(f"cancelled after {len(units)} units")
                units.append(extract_unit(tu, header, index))
        except (TmxError, etree.LxmlError, ValueError) as exc:
            self._fail(exc, cancelled)
            return

        snapshot = tuple(units)
        with self._lock:
            if cancelled is not self._cancelled:
                logger.debug("Discarding units of a superseded load")
                return
            published = not cancelled.is_set()
            if published:
                self._units = snapshot
        if not published:
            self._fail(LoadCancelledError(f"cancelled after {len(units)} units"), cancelled)
            return
        logger.debug("Committed %d units for %s", len(snapshot), self._file_path.name)

    def _huge_tree(self) -> bool:
        if self._settings is not None:
            return bool(self._settings.get("huge_tree", False))
        return bool(config.get_setting("huge_tree", False))

    def _fail(
        self,
        exc: BaseException,
        token: threading.Event | None = None,
        *,
        message: str | None = None,
    ) -> None:
        if message is None:
            message = f"There has been an error parsing {self._file_path.name}: {exc}"
        with self._lock:
            if token is not None and token is not self._cancelled:
                return
            self._error = exc
            self._error_message = message
        logger.error(message)

    def _set_error(self, exc: BaseException | None, message: str = "") -> None:
        with self._lock:
            self._error = exc
            self._error_message = message

    def wait_until_loaded(self, timeout: float | None = None) -> bool:
        """Block until the background unit extraction has finished.

        Returns ``False`` only if *timeout* elapsed first.  Returns at
        once when there is nothing to wait for.
        """
        future = self._future
        if future is None:
            return True
        done, _ = wait([future], timeout)
        if future not in done:
            return False
        # Expected failures are recorded as the sticky error; anything else is a bug
        future.result()
        return True

    async def wait_until_loaded_async(self) -> None:
        """Awaitable form of :meth:`wait_until_loaded`."""
        future = self._future
        if future is not None:
            await asyncio.wrap_future(future)

    def cancel(self) -> None:
        """Stop the background extraction before its next unit.

        Nothing is published; :attr:`error` becomes a
        :class:`LoadCancelledError`.  No effect once loading finished.
        """
        self._cancelled.set()

    def add_done_callback(self, callback: Callable[[TmxParser], None]) -> None:
        """Call ``callback(parser)`` once the background phase finishes.

        Runs on the background thread, or immediately if loading
        already finished (including a load that failed synchronously).
        """
        future = self._future
        if future is None:
            callback(self)
            return
        future.add_done_callback(lambda _: callback(self))

    # ── Snapshots ───────────────────────────────────────────────

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def header(self) -> TmxHeader:
        with self._lock:
            return self._header

    @property
    def translation_units(self) -> tuple[TranslationUnit, ...]:
        with self._lock:
            return self._units

    @property
    def is_loaded(self) -> bool:
        future = self._future
        return future is None or future.done()

    @property
    def has_error(self) -> bool:
        with self._lock:
            return self._error is not None

    @property
    def error_message(self) -> str:
        with self._lock:
            return self._error_message

    @property
    def error(self) -> BaseException | None:
        with self._lock:
            return self._error

    # ── Context manager ─────────────────────────────────────────

    def __enter__(self) -> TmxParser:
        return self

    def __exit__(self, *exc_info) -> None:
        self.wait_until_loaded()

    def __repr__(self) -> str:
        return f"TmxParser({str(self._file_path)!r}, units={len(self.translation_units)})"
