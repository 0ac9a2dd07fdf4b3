"""Shared pytest fixtures for TMX reader tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from tmxreader.parser import TmxParser

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def small_tmx_path() -> Path:
    return FIXTURES_DIR / "small.tmx"


@pytest.fixture
def malformed_tmx_path() -> Path:
    return FIXTURES_DIR / "malformed.tmx"


@pytest.fixture
def entities_tmx_path() -> Path:
    return FIXTURES_DIR / "entities.tmx"


@pytest.fixture
def small_parser(small_tmx_path: Path) -> TmxParser:
    parser = TmxParser(small_tmx_path, settings={})
    parser.wait_until_loaded()
    return parser


@pytest.fixture
def make_tmx(tmp_path: Path) -> Callable[..., Path]:
    """Write a TMX file from a header and raw ``<tu>`` markup."""

    def _make(
        body: str,
        *,
        header: str = '<header srclang="en" creationid="tester"/>',
        name: str = "generated.tmx",
    ) -> Path:
        path = tmp_path / name
        path.write_text(
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            f'<tmx version="1.4">{header}<body>{body}</body></tmx>\n',
            encoding="utf-8",
        )
        return path

    return _make


def unit_markup(number: int) -> str:
    return (
        f'<tu tuid="{number}">'
        f'<tuv xml:lang="en"><seg>Source {number}</seg></tuv>'
        f'<tuv xml:lang="fr"><seg>Cible {number}</seg></tuv>'
        "</tu>"
    )


@pytest.fixture
def large_tmx_path(make_tmx) -> Path:
    return make_tmx("".join(unit_markup(n) for n in range(1, 5001)), name="large.tmx")
