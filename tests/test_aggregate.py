"""Tests for winner and aggregation queries.

Pruebas de ganadores y agregación.
"""

from __future__ import annotations

import pytest

from geoelectoral.core.aggregate import (
    aggregate,
    candidate_by_name,
    compute_winner,
    filter_stations,
    find_station,
    participation_rate,
    rank_candidates,
    votes_by_comuna,
)
from geoelectoral.core.models import AggregateFilter, ComunaTotal, Dataset


def test_compute_winner_first_inserted_wins_ties() -> None:
    assert compute_winner({"a": 3, "b": 5, "c": 5}) == "b"
    assert compute_winner({"a": 0, "b": 0}) == "a"
    assert compute_winner({}) == "N/A"


def test_participation_rate() -> None:
    assert participation_rate(50, 200) == pytest.approx(25.0)
    assert participation_rate(10, 0) == 0.0


def test_unfiltered_aggregate(sample_dataset: Dataset) -> None:
    """Unfiltered totals equal the sum of station totals."""
    result = aggregate(sample_dataset)

    assert result.total_votes == 18800
    assert result.total_votes == sum(station.total_votes for station in sample_dataset.stations)
    assert result.potential_voters == 35500
    assert result.participation_rate == pytest.approx(18800 / 35500 * 100)
    assert result.leading_candidate == "Lista Centro Democrático"
    assert result.station_count == 5
    assert result.votes_by_candidate["Lista Pacto Histórico"] == 4300
    assert result.votes_by_candidate["Lista Centro Democrático"] == 6000
    assert sum(result.votes_by_candidate.values()) == result.total_votes


def test_comuna_filter_only_includes_that_comuna(sample_dataset: Dataset) -> None:
    filters = AggregateFilter(comuna="Laureles")

    stations = filter_stations(sample_dataset, filters)
    result = aggregate(sample_dataset, filters)

    assert {station.comuna_name for station in stations} == {"Laureles"}
    assert result.total_votes == 4300
    assert result.potential_voters == 7500
    assert result.leading_candidate == "Lista Centro Democrático"


def test_corporation_filters(sample_dataset: Dataset) -> None:
    senado = aggregate(sample_dataset, AggregateFilter(corporation="Senado"))
    camara = aggregate(sample_dataset, AggregateFilter(corporation="Cámara"))

    assert (senado.total_votes, senado.potential_voters, senado.station_count) == (14200, 20500, 3)
    assert (camara.total_votes, camara.potential_voters, camara.station_count) == (4600, 15000, 2)
    assert camara.leading_candidate == "Daniel Restrepo"


def test_combined_filters(sample_dataset: Dataset) -> None:
    result = aggregate(sample_dataset, AggregateFilter(comuna="Poblado", corporation="Cámara"))

    assert result.total_votes == 2300
    assert result.leading_candidate == "Susana Boreal"


def test_empty_strings_match_everything(sample_dataset: Dataset) -> None:
    assert aggregate(sample_dataset, AggregateFilter(comuna="", corporation="")) == aggregate(sample_dataset)


def test_corporation_without_stations_yields_zeros(sample_dataset: Dataset) -> None:
    """Every known candidate still appears, at zero."""
    result = aggregate(sample_dataset, AggregateFilter(corporation="Asamblea"))

    assert result.total_votes == 0
    assert result.potential_voters == 0
    assert result.participation_rate == 0
    assert result.station_count == 0
    assert len(result.votes_by_candidate) == len(sample_dataset.candidates)
    assert set(result.votes_by_candidate.values()) == {0}
    assert result.leading_candidate == sample_dataset.candidates[0].name


def test_rank_candidates_sorted_with_shares(sample_dataset: Dataset) -> None:
    result = aggregate(sample_dataset)

    ranking = rank_candidates(sample_dataset, result)

    assert [standing.candidate.name for standing in ranking[:3]] == [
        "Lista Centro Democrático",
        "Lista Pacto Histórico",
        "Lista Partido Liberal",
    ]
    assert [standing.votes for standing in ranking] == sorted((s.votes for s in ranking), reverse=True)
    assert ranking[0].percentage == pytest.approx(6000 / 18800 * 100)
    assert sum(standing.percentage for standing in ranking) == pytest.approx(100)


def test_rank_candidates_excludes_zero_vote_candidates(sample_dataset: Dataset) -> None:
    result = aggregate(sample_dataset, AggregateFilter(corporation="Cámara"))

    names = [standing.candidate.name for standing in rank_candidates(sample_dataset, result)]

    assert names == ["Daniel Restrepo", "Susana Boreal", "Daniel Carvalho", "Mauricio Parodi"]


def test_rank_candidates_empty_selection(sample_dataset: Dataset) -> None:
    result = aggregate(sample_dataset, AggregateFilter(corporation="Asamblea"))

    assert rank_candidates(sample_dataset, result) == []


def test_votes_by_comuna(sample_dataset: Dataset) -> None:
    assert votes_by_comuna(sample_dataset) == [
        ComunaTotal("El Poblado", 6500),
        ComunaTotal("Estadio", 2300),
        ComunaTotal("La Candelaria", 3400),
        ComunaTotal("Laureles", 4300),
        ComunaTotal("Poblado", 2300),
    ]


def test_votes_by_comuna_omits_empty_comunas(sample_dataset: Dataset) -> None:
    assert [total.comuna for total in votes_by_comuna(sample_dataset, "Senado")] == [
        "El Poblado",
        "La Candelaria",
        "Laureles",
    ]


def test_find_station_and_candidate(sample_dataset: Dataset) -> None:
    station = find_station(sample_dataset, "universidad-eafit-el-poblado-senado")

    assert station is not None
    assert station.winner_name == "Lista Centro Democrático"
    winner = candidate_by_name(sample_dataset, station.winner_name)
    assert winner is not None
    assert winner.color == "#3b82f6"
    assert find_station(sample_dataset, "missing") is None
    assert candidate_by_name(sample_dataset, "Nadie") is None


def test_aggregate_does_not_mutate_dataset(sample_dataset: Dataset) -> None:
    before = [dict(station.votes) for station in sample_dataset.stations]

    aggregate(sample_dataset, AggregateFilter(comuna="Estadio"))

    assert [station.votes for station in sample_dataset.stations] == before
