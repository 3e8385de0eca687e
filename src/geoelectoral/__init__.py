"""
======================== ÍNDICE / INDEX ========================
1. Descripción general / Overview
2. Componentes principales / Main components
3. Notas de mantenimiento / Maintenance notes

======================== ESPAÑOL ========================
Archivo: `src/geoelectoral/__init__.py`.
Motor de ingesta y agregación de resultados electorales por puesto de
votación.

Componentes detectados:
  - ingest
  - aggregate
  - IngestionEngine

Notas:
- Mantener esta cabecera sincronizada con cambios estructurales del archivo.

======================== ENGLISH ========================
File: `src/geoelectoral/__init__.py`.
Ingestion and aggregation engine for polling-station electoral results.

Detected components:
  - ingest
  - aggregate
  - IngestionEngine

Notes:
- Keep this header in sync with structural changes in the file.
"""

from geoelectoral.core.aggregate import aggregate
from geoelectoral.core.ingest import IngestionEngine, ingest
from geoelectoral.core.models import AggregateFilter, AggregateResult, Dataset
from geoelectoral.errors import ConfigurationError

__version__ = "0.1.0"

__all__ = [
    "AggregateFilter",
    "AggregateResult",
    "ConfigurationError",
    "Dataset",
    "IngestionEngine",
    "aggregate",
    "ingest",
]
