"""Configuración del motor: tablas de referencia y variables de entorno.

Las tablas de referencia (colores de partido, centroides de comunas, centro de
ciudad, etiquetas por defecto y sinónimos de columnas) se cargan desde YAML y
se validan con Pydantic para que otras ciudades o elecciones puedan aportar
las suyas.

English:
    Engine configuration: reference tables and environment settings.
    Reference tables are loaded from YAML and validated with Pydantic so other
    cities or elections can supply their own.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from geoelectoral.core.columns import COLUMN_KEYWORDS
from geoelectoral.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_RESOURCE = "data/medellin.yaml"

_ENV_PATH = Path(".env")
_ENV_LOCAL_PATH = Path(".env.local")

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Coordinate(BaseModel):
    """Coordenada WGS84. / WGS84 coordinate."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)

    def as_tuple(self) -> Tuple[float, float]:
        return (self.lat, self.lng)


class FallbackLabels(BaseModel):
    """Etiquetas para celdas vacías o columnas ausentes. / Labels for empty cells or absent columns."""

    model_config = ConfigDict(frozen=True)

    comuna: str = "Unknown zone"
    corporation: str = "General"
    candidate: str = "Unknown"
    party: str = "Independent"


class ReferenceTables(BaseModel):
    """Tablas estáticas inyectadas en el motor.

    English:
        Static lookup tables injected into the engine. ``centroids`` keeps the
        YAML definition order, which decides substring matches.
    """

    model_config = ConfigDict(frozen=True)

    name: str = "default"
    party_colors: Dict[str, str] = Field(default_factory=dict)
    default_color: str = "#64748b"
    centroids: Dict[str, Coordinate] = Field(default_factory=dict)
    city_center: Coordinate
    comuna_jitter: float = Field(default=0.003, gt=0)
    city_jitter: float = Field(default=0.01, gt=0)
    labels: FallbackLabels = Field(default_factory=FallbackLabels)
    column_keywords: Dict[str, List[str]] = Field(
        default_factory=lambda: {key: list(value) for key, value in COLUMN_KEYWORDS.items()}
    )

    @field_validator("party_colors", "centroids", mode="before")
    @classmethod
    def _normalize_keys(cls, value: Optional[dict]) -> dict:
        """Claves en minúscula y sin espacios extremos. / Lowercase, trimmed keys."""
        if value is None:
            return {}
        return {str(key).lower().strip(): item for key, item in value.items()}

    @field_validator("column_keywords")
    @classmethod
    def _known_fields_only(cls, value: Dict[str, List[str]]) -> Dict[str, List[str]]:
        unknown = sorted(set(value) - set(COLUMN_KEYWORDS))
        if unknown:
            raise ValueError(f"unknown column fields: {', '.join(unknown)}")
        merged = {key: list(synonyms) for key, synonyms in COLUMN_KEYWORDS.items()}
        for key, synonyms in value.items():
            if not synonyms:
                raise ValueError(f"column field '{key}' needs at least one keyword")
            merged[key] = [synonym.lower() for synonym in synonyms]
        return merged

    def centroid_table(self) -> Dict[str, Tuple[float, float]]:
        return {key: coordinate.as_tuple() for key, coordinate in self.centroids.items()}


def _parse_reference_yaml(text: str, source_name: str) -> ReferenceTables:
    try:
        raw = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            f"{source_name} tiene errores de sintaxis YAML ({source_name} has YAML syntax errors)."
        ) from exc
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{source_name} debe ser un mapa YAML ({source_name} must be a YAML mapping).")
    try:
        return ReferenceTables.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(
            f"{source_name} no cumple el esquema de tablas de referencia "
            f"({source_name} does not meet the reference tables schema): {exc}"
        ) from exc


def load_reference_tables(path: str | Path | None = None) -> ReferenceTables:
    """Carga tablas de referencia desde YAML o las tablas empaquetadas.

    English:
        Load reference tables from a YAML file, or the bundled Medellín
        tables when ``path`` is ``None``.
    """
    if path is None:
        return default_reference_tables()
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Falta {path.as_posix()} (Missing {path.as_posix()}).")
    tables = _parse_reference_yaml(path.read_text(encoding="utf-8"), path.name)
    logger.debug("reference_tables_loaded path=%s name=%s", path.as_posix(), tables.name)
    return tables


@lru_cache(maxsize=1)
def _bundled_reference_tables() -> ReferenceTables:
    text = resources.files("geoelectoral").joinpath(DEFAULT_REFERENCE_RESOURCE).read_text(encoding="utf-8")
    return _parse_reference_yaml(text, DEFAULT_REFERENCE_RESOURCE)


def default_reference_tables() -> ReferenceTables:
    """Tablas empaquetadas de Medellín.

    El YAML se lee una sola vez; cada llamada recibe una copia profunda, así
    que mutar los diccionarios de una instancia no afecta a otros motores.

    English:
        Bundled Medellín tables. The YAML is parsed once; every call gets a
        deep copy, so mutating one instance never leaks into other engines.
    """
    return _bundled_reference_tables().model_copy(deep=True)


class EngineSettings(BaseSettings):
    """Variables de entorno y archivo .env del motor.

    English: Environment variables and .env file for the engine.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[Path] = None
    REFERENCE_TABLES_PATH: Optional[Path] = None
    GEOCODING_SEED: Optional[int] = None

    @field_validator("LOG_LEVEL")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.upper().strip()
        if level not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}")
        return level


def load_settings() -> EngineSettings:
    """/** Carga y valida configuración, fallando con detalle. / Load and validate settings, failing with details. **/"""
    load_dotenv(_ENV_PATH, override=False)
    load_dotenv(_ENV_LOCAL_PATH, override=False)
    try:
        settings = EngineSettings()
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc
    if settings.REFERENCE_TABLES_PATH is not None and not settings.REFERENCE_TABLES_PATH.is_file():
        raise ValueError(f"REFERENCE_TABLES_PATH does not exist: {settings.REFERENCE_TABLES_PATH}")
    return settings
