"""Resolución flexible de columnas en archivos de resultados.

Detecta el separador y asigna a cada campo canónico el índice de la primera
cabecera que contiene alguno de sus sinónimos.

English:
    Flexible column resolution for results files. Detects the delimiter and
    maps each canonical field to the first header containing any of its
    keyword synonyms.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from geoelectoral.core.models import ColumnMap
from geoelectoral.errors import ConfigurationError

logger = logging.getLogger(__name__)

COLUMN_KEYWORDS: Dict[str, List[str]] = {
    "station": ["puesto", "lugar", "ubica"],
    "comuna": ["comuna", "zona", "localidad"],
    "corporation": ["corporacion", "cuerpo", "eleccion"],
    "candidate": ["candidato", "nombre", "lista"],
    "party": ["partido", "movimiento"],
    "votes": ["votos", "cantidad", "resultado"],
    "latitude": ["lat", "norte"],
    "longitude": ["lng", "lon", "este"],
    "potential_voters": ["potencial", "habilitados", "censo"],
}

REQUIRED_FIELDS = ("station", "votes")


def detect_delimiter(header_line: str) -> str:
    """Punto y coma si la cabecera lo contiene, si no coma. / Semicolon if present, else comma."""
    return ";" if ";" in header_line else ","


def split_cells(line: str, delimiter: str) -> List[str]:
    """Divide una línea y limpia espacios y comillas dobles.

    English:
        Split a line and strip surrounding whitespace and double quotes from
        every cell.
    """
    return [cell.strip().replace('"', "") for cell in line.split(delimiter)]


def normalize_headers(header_line: str, delimiter: str) -> List[str]:
    return [cell.lower() for cell in split_cells(header_line, delimiter)]


def find_column(headers: Sequence[str], keywords: Iterable[str]) -> Optional[int]:
    """Índice de la primera cabecera con algún sinónimo, o ``None``.

    English:
        Index of the first header containing any keyword, or ``None``.
    """
    keywords = [keyword.lower() for keyword in keywords]
    for index, header in enumerate(headers):
        if any(keyword in header for keyword in keywords):
            return index
    return None


def resolve_columns(
    header_line: str,
    keywords: Mapping[str, Sequence[str]] | None = None,
) -> ColumnMap:
    """Construye el mapa de columnas a partir de la línea de cabecera.

    Args:
        header_line: Primera línea del archivo.
        keywords: Sinónimos por campo canónico; por defecto ``COLUMN_KEYWORDS``.

    Returns:
        ``ColumnMap`` con índices o ``None`` para columnas ausentes.

    Raises:
        ConfigurationError: Si faltan las columnas de puesto o votos.

    English:
        Build the column map from the header line. Missing optional fields
        resolve to ``None``; missing station or votes columns raise
        ``ConfigurationError``.
    """
    merged: Dict[str, Sequence[str]] = dict(COLUMN_KEYWORDS)
    if keywords:
        merged.update(keywords)

    delimiter = detect_delimiter(header_line)
    headers = normalize_headers(header_line, delimiter)
    indexes = {name: find_column(headers, synonyms) for name, synonyms in merged.items()}

    missing = [name for name in REQUIRED_FIELDS if indexes.get(name) is None]
    if missing:
        raise ConfigurationError(
            "Columnas mínimas requeridas: 'Puesto' y 'Votos' "
            f"(required columns not found: {', '.join(missing)}; headers: {headers})."
        )

    logger.debug("columns_resolved delimiter=%r indexes=%s", delimiter, indexes)
    return ColumnMap(
        delimiter=delimiter,
        station=indexes["station"],
        votes=indexes["votes"],
        comuna=indexes.get("comuna"),
        corporation=indexes.get("corporation"),
        candidate=indexes.get("candidate"),
        party=indexes.get("party"),
        latitude=indexes.get("latitude"),
        longitude=indexes.get("longitude"),
        potential_voters=indexes.get("potential_voters"),
    )
