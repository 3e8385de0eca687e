"""
======================== ÍNDICE / INDEX ========================
1. Descripción general / Overview
2. Componentes principales / Main components
3. Notas de mantenimiento / Maintenance notes

======================== ESPAÑOL ========================
Archivo: `src/geoelectoral/core/ingest.py`.
Ingesta de resultados electorales en texto delimitado: agrupa filas en puestos
y candidatos, acumula votos, georreferencia puestos sin coordenadas y calcula
ganadores.

Componentes detectados:
  - normalize_key
  - parse_votes
  - IngestionEngine
  - ingest

Notas:
- La clave de puesto y de candidato se calcula con `normalize_key` en todos
  los puntos de inserción.

======================== ENGLISH ========================
File: `src/geoelectoral/core/ingest.py`.
Ingestion of delimited electoral results: groups rows into stations and
candidates, accumulates votes, geocodes stations without coordinates and
computes winners.

Detected components:
  - normalize_key
  - parse_votes
  - IngestionEngine
  - ingest

Notes:
- Station and candidate keys are always built with `normalize_key`.
"""

from __future__ import annotations

import logging
import random
import re
from typing import Dict, List, NamedTuple, Optional

from geoelectoral.config import ReferenceTables, default_reference_tables
from geoelectoral.core.aggregate import compute_winner
from geoelectoral.core.columns import resolve_columns, split_cells
from geoelectoral.core.geocoding import GeocodingResolver
from geoelectoral.core.models import Candidate, ColumnMap, Dataset, LoadReport, PollingStation
from geoelectoral.core.parties import avatar_initials, color_for_party
from geoelectoral.errors import ConfigurationError, RecoverableRowError

logger = logging.getLogger(__name__)

_INT_PREFIX = re.compile(r"^\s*[+-]?\d+")
_WHITESPACE = re.compile(r"\s+")


class _Row(NamedTuple):
    station: str
    comuna: str
    corporation: str
    candidate: str
    party: str
    votes_cell: Optional[str]
    lat: Optional[str]
    lng: Optional[str]
    potential_cell: Optional[str]


def normalize_key(*parts: str) -> str:
    """Clave estable: partes unidas por guion, minúsculas, espacios colapsados.

    English:
        Stable join key: parts joined by ``-``, lowercased, every whitespace
        run replaced by ``-``.
    """
    return _WHITESPACE.sub("-", "-".join(parts).lower())


def _parse_int_prefix(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    match = _INT_PREFIX.match(raw)
    if not match:
        return None
    return int(match.group(0))


def parse_votes(raw: Optional[str], line_number: int) -> int:
    """Entero inicial de la celda de votos.

    Raises:
        RecoverableRowError: Si la celda está vacía o no es numérica.

    English:
        Leading integer of the votes cell (``"2500.7"`` -> 2500).
    """
    value = _parse_int_prefix(raw)
    if value is None:
        raise RecoverableRowError("unparsed_votes", line_number, repr(raw))
    return value


def estimate_potential_voters(total_votes: int) -> int:
    """/** round(total * 1.5) con redondeo hacia arriba en .5. / round(total * 1.5), halves rounded up. **/"""
    return (3 * total_votes + 1) // 2


def _cell(row: List[str], index: Optional[int]) -> Optional[str]:
    if index is None or index >= len(row):
        return None
    return row[index]


class IngestionEngine:
    """Motor de ingesta sin estado entre llamadas.

    Las tablas de referencia y la fuente aleatoria se inyectan al construirlo;
    cada llamada a ``ingest`` produce un Dataset nuevo e independiente.

    English:
        Ingestion engine with no state between calls. Reference tables and the
        random source are injected at construction; every ``ingest`` call
        returns a new, independent Dataset.
    """

    def __init__(
        self,
        reference: ReferenceTables | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.reference = reference or default_reference_tables()
        self.geocoder = GeocodingResolver(
            self.reference.centroid_table(),
            self.reference.city_center.as_tuple(),
            comuna_jitter=self.reference.comuna_jitter,
            city_jitter=self.reference.city_jitter,
            rng=rng,
        )

    def _read_row(self, line: str, columns: ColumnMap, line_number: int) -> _Row:
        row = split_cells(line, columns.delimiter)
        if len(row) < 2:
            raise RecoverableRowError("malformed_row", line_number, f"{len(row)} column(s)")

        labels = self.reference.labels
        return _Row(
            station=_cell(row, columns.station) or "",
            comuna=_cell(row, columns.comuna) or labels.comuna,
            corporation=_cell(row, columns.corporation) or labels.corporation,
            candidate=_cell(row, columns.candidate) or labels.candidate,
            party=_cell(row, columns.party) or labels.party,
            votes_cell=_cell(row, columns.votes),
            lat=_cell(row, columns.latitude),
            lng=_cell(row, columns.longitude),
            potential_cell=_cell(row, columns.potential_voters),
        )

    def _new_candidate(self, candidate_id: str, row: _Row) -> Candidate:
        return Candidate(
            id=candidate_id,
            name=row.candidate,
            party=row.party,
            color=color_for_party(row.party, self.reference.party_colors, self.reference.default_color),
            avatar=avatar_initials(row.candidate),
        )

    def _new_station(self, station_id: str, row: _Row) -> PollingStation:
        location = self.geocoder.resolve(row.comuna, row.lat, row.lng)
        return PollingStation(
            id=station_id,
            name=row.station,
            comuna_name=row.comuna,
            corporation=row.corporation,
            lat=location.lat,
            lng=location.lng,
            is_approximate=location.is_approximate,
            potential_voters=_parse_int_prefix(row.potential_cell) or 0,
        )

    def ingest(self, raw_text: str) -> Dataset:
        """Convierte el texto crudo en un Dataset.

        Raises:
            ConfigurationError: Menos de dos líneas o columnas mínimas ausentes.

        English:
            Turn raw delimited text into a Dataset. Malformed rows are skipped
            and unparseable vote cells count as zero; both are tallied in the
            load report.
        """
        lines = raw_text.strip().split("\n")
        if len(lines) < 2:
            raise ConfigurationError("Archivo vacío o incompleto (empty or incomplete file).")

        columns = resolve_columns(lines[0], self.reference.column_keywords)

        stations: Dict[str, PollingStation] = {}
        candidates: Dict[str, Candidate] = {}
        skipped_rows = 0
        unparsed_votes = 0

        for line_number, line in enumerate(lines[1:], start=2):
            try:
                row = self._read_row(line, columns, line_number)
            except RecoverableRowError as exc:
                skipped_rows += 1
                logger.debug("row_skipped reason=%s detail=%s", exc.reason, exc)
                continue

            try:
                votes = parse_votes(row.votes_cell, line_number)
            except RecoverableRowError as exc:
                unparsed_votes += 1
                logger.debug("votes_unparsed detail=%s", exc)
                votes = 0

            candidate_id = normalize_key(row.candidate, row.party)
            candidate = candidates.get(candidate_id)
            if candidate is None:
                candidate = self._new_candidate(candidate_id, row)
                candidates[candidate_id] = candidate

            station_id = normalize_key(row.station, row.comuna, row.corporation)
            station = stations.get(station_id)
            if station is None:
                station = self._new_station(station_id, row)
                stations[station_id] = station

            station.add_votes(candidate.name, votes)

        for station in stations.values():
            station.winner_name = compute_winner(station.votes)
            if station.potential_voters <= 0:
                station.potential_voters = estimate_potential_voters(station.total_votes)

        exact = sum(1 for station in stations.values() if not station.is_approximate)
        report = LoadReport(
            exact=exact,
            approximate=len(stations) - exact,
            total=len(stations),
            skipped_rows=skipped_rows,
            unparsed_votes=unparsed_votes,
        )
        logger.info(
            "dataset_ingested stations=%s candidates=%s exact=%s approximate=%s skipped_rows=%s unparsed_votes=%s",
            report.total,
            len(candidates),
            report.exact,
            report.approximate,
            report.skipped_rows,
            report.unparsed_votes,
        )
        return Dataset(
            stations=tuple(stations.values()),
            candidates=tuple(candidates.values()),
            comunas=tuple(sorted({station.comuna_name for station in stations.values()})),
            corporations=tuple(sorted({station.corporation for station in stations.values()})),
            load_report=report,
        )


def ingest(
    raw_text: str,
    reference: ReferenceTables | None = None,
    rng: random.Random | None = None,
) -> Dataset:
    """/** Atajo sobre ``IngestionEngine(...).ingest``. / Shortcut for ``IngestionEngine(...).ingest``. **/"""
    return IngestionEngine(reference=reference, rng=rng).ingest(raw_text)
