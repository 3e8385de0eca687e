"""
======================== ÍNDICE / INDEX ========================
1. Descripción general / Overview
2. Componentes principales / Main components
3. Notas de mantenimiento / Maintenance notes

======================== ESPAÑOL ========================
Archivo: `src/geoelectoral/core/models.py`.
Modelos de dominio del motor: candidatos, puestos de votación, reporte de
carga, dataset y resultados agregados.

Componentes detectados:
  - ColumnMap
  - Candidate
  - PollingStation
  - LoadReport
  - Dataset
  - AggregateFilter
  - AggregateResult
  - CandidateStanding
  - ComunaTotal

Notas:
- Mantener esta cabecera sincronizada con cambios estructurales del archivo.

======================== ENGLISH ========================
File: `src/geoelectoral/core/models.py`.
Engine domain models: candidates, polling stations, load report, dataset and
aggregate results.

Detected components:
  - ColumnMap
  - Candidate
  - PollingStation
  - LoadReport
  - Dataset
  - AggregateFilter
  - AggregateResult
  - CandidateStanding
  - ComunaTotal

Notes:
- Keep this header in sync with structural changes in the file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

NO_WINNER = "N/A"


@dataclass(frozen=True)
class ColumnMap:
    """Índices de columnas canónicas dentro de la cabecera.

    Un valor ``None`` indica que la columna no existe en el archivo.

    English:
        Canonical column indexes within the header row. ``None`` means the
        column is absent from the file.
    """

    delimiter: str
    station: int
    votes: int
    comuna: Optional[int] = None
    corporation: Optional[int] = None
    candidate: Optional[int] = None
    party: Optional[int] = None
    latitude: Optional[int] = None
    longitude: Optional[int] = None
    potential_voters: Optional[int] = None


@dataclass(frozen=True)
class Candidate:
    """Candidato o lista identificado por nombre + partido.

    Attributes:
        id (str): Clave normalizada ``nombre-partido``.
        name (str): Nombre a mostrar.
        party (str): Partido o movimiento.
        color (str): Color hexadecimal del partido.
        avatar (str): Iniciales de dos letras.

    English:
        Candidate or list identified by name + party.
    """

    id: str
    name: str
    party: str
    color: str
    avatar: str


@dataclass
class PollingStation:
    """Puesto de votación por corporación.

    English:
        Polling station for a single corporation. Votes are accumulated while
        rows are ingested; ``total_votes`` always equals the sum of ``votes``.
    """

    id: str
    name: str
    comuna_name: str
    corporation: str
    lat: float
    lng: float
    is_approximate: bool
    potential_voters: int = 0
    votes: Dict[str, int] = field(default_factory=dict)
    total_votes: int = 0
    winner_name: str = NO_WINNER

    def add_votes(self, candidate_name: str, amount: int) -> None:
        """Acumula votos de un candidato. / Accumulate votes for a candidate."""
        self.votes[candidate_name] = self.votes.get(candidate_name, 0) + amount
        self.total_votes += amount


@dataclass(frozen=True)
class LoadReport:
    """Resumen de una ingesta.

    Attributes:
        exact (int): Puestos con coordenadas exactas.
        approximate (int): Puestos con coordenadas aproximadas.
        total (int): Total de puestos.
        skipped_rows (int): Filas descartadas por malformadas.
        unparsed_votes (int): Filas cuyo conteo de votos no se pudo leer.

    English:
        Summary counters produced once per ingestion.
    """

    exact: int
    approximate: int
    total: int
    skipped_rows: int = 0
    unparsed_votes: int = 0

    def summary(self) -> str:
        return f"{self.exact} exact, {self.approximate} approximate"


@dataclass(frozen=True)
class Dataset:
    """Resultado de la ingesta, propiedad exclusiva del consumidor.

    English:
        Ingestion output, owned exclusively by the consumer.
    """

    stations: Tuple[PollingStation, ...]
    candidates: Tuple[Candidate, ...]
    comunas: Tuple[str, ...]
    corporations: Tuple[str, ...]
    load_report: LoadReport


@dataclass(frozen=True)
class AggregateFilter:
    """Filtro opcional por comuna y corporación. / Optional comuna and corporation filter."""

    comuna: Optional[str] = None
    corporation: Optional[str] = None

    def matches(self, station: PollingStation) -> bool:
        if self.comuna and station.comuna_name != self.comuna:
            return False
        if self.corporation and station.corporation != self.corporation:
            return False
        return True


@dataclass(frozen=True)
class AggregateResult:
    """Totales consolidados sobre un subconjunto filtrado de puestos.

    English:
        Consolidated totals over a filtered subset of stations.
        ``participation_rate`` is a percentage.
    """

    total_votes: int
    potential_voters: int
    votes_by_candidate: Dict[str, int]
    leading_candidate: str
    participation_rate: float
    station_count: int


@dataclass(frozen=True)
class CandidateStanding:
    candidate: Candidate
    votes: int
    percentage: float


@dataclass(frozen=True)
class ComunaTotal:
    comuna: str
    votes: int
