"""
======================== ÍNDICE / INDEX ========================
1. Descripción general / Overview
2. Componentes principales / Main components

======================== ESPAÑOL ========================
Archivo: `tests/conftest.py`.
Fixtures compartidas: bloqueo de red, tablas de referencia, fuente aleatoria
con semilla y datos de ejemplo.

Componentes detectados:
  - block_network
  - reference
  - rng
  - sample_text
  - sample_dataset

======================== ENGLISH ========================
File: `tests/conftest.py`.
Shared fixtures: network guard, reference tables, seeded random source and
sample data.
"""

from __future__ import annotations

import random
import socket
from typing import Any

import pytest

from geoelectoral.config import ReferenceTables, default_reference_tables
from geoelectoral.core.ingest import ingest
from geoelectoral.core.models import Dataset
from geoelectoral.sources import load_sample

SAMPLE_SEED = 2023


@pytest.fixture(autouse=True)
def block_network(monkeypatch: pytest.MonkeyPatch) -> None:
    """Impide conexiones de red reales en tests.

    English:
        Prevents real network connections in tests.
    """

    def guarded_connect(*args: Any, **kwargs: Any) -> None:
        raise RuntimeError("Network access is disabled during tests.")

    monkeypatch.setattr(socket.socket, "connect", guarded_connect, raising=True)
    monkeypatch.setattr(socket, "create_connection", guarded_connect, raising=True)


@pytest.fixture
def reference() -> ReferenceTables:
    return default_reference_tables()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(SAMPLE_SEED)


@pytest.fixture
def sample_text() -> str:
    return load_sample()


@pytest.fixture
def sample_dataset(sample_text: str, reference: ReferenceTables) -> Dataset:
    return ingest(sample_text, reference=reference, rng=random.Random(SAMPLE_SEED))
