"""Pruebas del resolvedor de columnas. / Column resolver tests."""

from __future__ import annotations

import pytest

from geoelectoral.core.columns import detect_delimiter, find_column, resolve_columns, split_cells
from geoelectoral.errors import ConfigurationError

SAMPLE_HEADER = "corporacion,puesto,comuna,candidato,partido,votos,lat,lng,potencial"


def test_detect_delimiter_prefers_semicolon() -> None:
    """Semicolon wins when present. / El punto y coma gana si aparece."""
    assert detect_delimiter("puesto;votos") == ";"
    assert detect_delimiter("puesto,votos") == ","
    assert detect_delimiter("puesto,votos;zona") == ";"


def test_split_cells_strips_quotes_and_spaces() -> None:
    assert split_cells(' "EAFIT" ; 2500 ;"El Poblado"\r', ";") == ["EAFIT", "2500", "El Poblado"]


def test_resolve_sample_header() -> None:
    """Every canonical field resolves on the sample header."""
    columns = resolve_columns(SAMPLE_HEADER)

    assert columns.delimiter == ","
    assert columns.corporation == 0
    assert columns.station == 1
    assert columns.comuna == 2
    assert columns.candidate == 3
    assert columns.party == 4
    assert columns.votes == 5
    assert columns.latitude == 6
    assert columns.longitude == 7
    assert columns.potential_voters == 8


def test_resolve_matches_synonyms_case_insensitively() -> None:
    """Headers match by keyword containment, ignoring case and quotes."""
    columns = resolve_columns('"ZONA";"Lugar de Votación";"Cantidad";"Latitud";"Longitud";"Habilitados"')

    assert columns.delimiter == ";"
    assert columns.comuna == 0
    assert columns.station == 1
    assert columns.votes == 2
    assert columns.latitude == 3
    assert columns.longitude == 4
    assert columns.potential_voters == 5


def test_optional_fields_resolve_to_none() -> None:
    columns = resolve_columns("puesto,votos")

    assert columns.station == 0
    assert columns.votes == 1
    assert columns.comuna is None
    assert columns.corporation is None
    assert columns.candidate is None
    assert columns.party is None
    assert columns.latitude is None
    assert columns.longitude is None
    assert columns.potential_voters is None


def test_first_matching_header_wins() -> None:
    assert find_column(["votos validos", "votos nulos"], ["votos"]) == 0
    assert find_column(["a", "b"], ["votos"]) is None


@pytest.mark.parametrize("header", ["comuna,votos", "puesto,comuna", "foo,bar"])
def test_missing_mandatory_columns_raise(header: str) -> None:
    """Missing station or votes is a configuration error."""
    with pytest.raises(ConfigurationError):
        resolve_columns(header)


def test_custom_keywords_override_defaults() -> None:
    columns = resolve_columns("mesa,aspirante,sufragios", {"station": ["mesa"], "candidate": ["aspirante"], "votes": ["sufragios"]})

    assert (columns.station, columns.candidate, columns.votes) == (0, 1, 2)
