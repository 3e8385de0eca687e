"""Consultas puras sobre un Dataset: ganadores, agregados y rankings.

English:
    Pure queries over a Dataset: winners, filtered aggregates and rankings.
    Nothing here mutates the dataset; consumers recompute on every filter
    change.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from geoelectoral.core.models import (
    NO_WINNER,
    AggregateFilter,
    AggregateResult,
    Candidate,
    CandidateStanding,
    ComunaTotal,
    Dataset,
    PollingStation,
)


def compute_winner(votes: Mapping[str, int]) -> str:
    """Nombre con más votos; en empate gana el primero insertado.

    English:
        Name with the most votes. Only a strictly greater count displaces the
        current leader, so ties go to the first-inserted name. An empty
        mapping yields ``"N/A"``.
    """
    winner = NO_WINNER
    max_votes = -1
    for name, count in votes.items():
        if count > max_votes:
            max_votes = count
            winner = name
    return winner


def participation_rate(total_votes: int, potential_voters: int) -> float:
    """/** Participación en porcentaje, 0 sin potencial. / Turnout percentage, 0 without potential voters. **/"""
    if potential_voters <= 0:
        return 0.0
    return total_votes / potential_voters * 100


def filter_stations(dataset: Dataset, filters: AggregateFilter | None = None) -> List[PollingStation]:
    filters = filters or AggregateFilter()
    return [station for station in dataset.stations if filters.matches(station)]


def aggregate(dataset: Dataset, filters: AggregateFilter | None = None) -> AggregateResult:
    """Consolida votos, potencial y líder sobre los puestos filtrados.

    Los candidatos conocidos se siembran en cero para que aparezcan aunque no
    tengan votos en el subconjunto.

    English:
        Consolidate votes, potential voters and the leader over the filtered
        stations. Every known candidate is seeded at zero so it appears even
        without votes in the subset.
    """
    stations = filter_stations(dataset, filters)

    votes_by_candidate: Dict[str, int] = {candidate.name: 0 for candidate in dataset.candidates}
    total_votes = 0
    potential_voters = 0
    for station in stations:
        total_votes += station.total_votes
        potential_voters += station.potential_voters
        for name, count in station.votes.items():
            votes_by_candidate[name] = votes_by_candidate.get(name, 0) + count

    return AggregateResult(
        total_votes=total_votes,
        potential_voters=potential_voters,
        votes_by_candidate=votes_by_candidate,
        leading_candidate=compute_winner(votes_by_candidate),
        participation_rate=participation_rate(total_votes, potential_voters),
        station_count=len(stations),
    )


def vote_share(votes: int, total: int) -> float:
    return votes / total * 100 if total > 0 else 0.0


def rank_candidates(dataset: Dataset, result: AggregateResult) -> List[CandidateStanding]:
    """Candidatos con votos, de mayor a menor, con su porcentaje.

    English:
        Candidates with at least one vote in ``result``, most votes first
        (stable for ties), each with its share of the aggregate total.
    """
    standings = [
        CandidateStanding(
            candidate=candidate,
            votes=result.votes_by_candidate.get(candidate.name, 0),
            percentage=vote_share(result.votes_by_candidate.get(candidate.name, 0), result.total_votes),
        )
        for candidate in dataset.candidates
        if result.votes_by_candidate.get(candidate.name, 0) > 0
    ]
    return sorted(standings, key=lambda standing: standing.votes, reverse=True)


def votes_by_comuna(dataset: Dataset, corporation: Optional[str] = None) -> List[ComunaTotal]:
    """Distribución zonal de votos; omite comunas sin votos.

    English:
        Zone distribution of votes for the optional corporation filter, in
        comuna order. Comunas without votes are omitted.
    """
    totals: List[ComunaTotal] = []
    for comuna in dataset.comunas:
        filters = AggregateFilter(comuna=comuna, corporation=corporation)
        votes = sum(station.total_votes for station in filter_stations(dataset, filters))
        if votes == 0:
            continue
        totals.append(ComunaTotal(comuna=comuna, votes=votes))
    return totals


def find_station(dataset: Dataset, station_id: str) -> Optional[PollingStation]:
    """/** Busca un puesto por id para callbacks de selección. / Look up a station by id for selection callbacks. **/"""
    for station in dataset.stations:
        if station.id == station_id:
            return station
    return None


def candidate_by_name(dataset: Dataset, name: str) -> Optional[Candidate]:
    for candidate in dataset.candidates:
        if candidate.name == name:
            return candidate
    return None
