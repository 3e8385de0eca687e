"""Serialización de Dataset y resultados agregados a estructuras simples.

English:
    Serialization of Datasets and aggregate results into plain structures for
    map and chart consumers.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any, Dict, List

from geoelectoral.core.models import AggregateResult, CandidateStanding, ComunaTotal, Dataset


def dataset_to_dict(dataset: Dataset) -> Dict[str, Any]:
    """/** Convierte un Dataset en diccionario simple. / Convert a Dataset into a plain dictionary. **/"""
    return {
        "stations": [asdict(station) for station in dataset.stations],
        "candidates": [candidate.__dict__ for candidate in dataset.candidates],
        "comunas": list(dataset.comunas),
        "corporations": list(dataset.corporations),
        "load_report": dataset.load_report.__dict__,
    }


def dataset_to_canonical_json(dataset: Dataset) -> str:
    """/** Serializa un Dataset a JSON canónico. / Serialize a Dataset into canonical JSON. **/"""
    return json.dumps(dataset_to_dict(dataset), sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def summary_to_dict(
    result: AggregateResult,
    standings: List[CandidateStanding],
    comunas: List[ComunaTotal],
) -> Dict[str, Any]:
    return {
        "total_votes": result.total_votes,
        "potential_voters": result.potential_voters,
        "participation_rate": round(result.participation_rate, 1),
        "leading_candidate": result.leading_candidate,
        "station_count": result.station_count,
        "votes_by_candidate": dict(result.votes_by_candidate),
        "ranking": [
            {
                "name": standing.candidate.name,
                "party": standing.candidate.party,
                "color": standing.candidate.color,
                "avatar": standing.candidate.avatar,
                "votes": standing.votes,
                "percentage": round(standing.percentage, 1),
            }
            for standing in standings
        ],
        "comunas": [asdict(total) for total in comunas],
    }
