"""Adquisición de archivos de resultados.

English:
    Results file acquisition. The engine itself never performs I/O; callers
    read text here and hand it to ``ingest``.
"""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path

from geoelectoral.errors import ConfigurationError

logger = logging.getLogger(__name__)

SAMPLE_RESOURCE = "data/sample_results.csv"
SUPPORTED_SUFFIXES = {".csv"}
# Excel exports in Spanish locales are usually Windows-1252.
FALLBACK_ENCODING = "cp1252"


def decode_results(raw: bytes, name: str = "<bytes>") -> str:
    """Decodifica UTF-8 (con o sin BOM) y, si falla, Windows-1252.

    Raises:
        ConfigurationError: Si ninguna codificación aplica.

    English:
        Decode UTF-8 (with or without BOM), falling back to Windows-1252.
    """
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass
    try:
        text = raw.decode(FALLBACK_ENCODING)
    except UnicodeDecodeError as exc:
        raise ConfigurationError(
            f"No se pudo leer {name}: codificación no soportada "
            f"(unsupported text encoding at byte {exc.start})."
        ) from exc
    logger.info("results_encoding_fallback file=%s encoding=%s", name, FALLBACK_ENCODING)
    return text


def read_results_file(path: str | Path) -> str:
    """Lee un CSV de resultados como texto.

    Raises:
        FileNotFoundError: Si el archivo no existe.
        ConfigurationError: Si la extensión no es ``.csv`` o el texto no se
            puede decodificar.

    English:
        Read a results CSV as text: UTF-8 first, Windows-1252 as fallback.
    """
    path = Path(path)
    if path.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise ConfigurationError(
            f"Por favor sube un archivo CSV válido (unsupported file type: {path.name})."
        )
    if not path.is_file():
        raise FileNotFoundError(f"Falta {path.as_posix()} (Missing {path.as_posix()}).")
    text = decode_results(path.read_bytes(), path.name)
    logger.debug("results_file_read path=%s chars=%s", path.as_posix(), len(text))
    return text


def load_sample() -> str:
    """/** Resultados de ejemplo empaquetados (Medellín). / Bundled sample results (Medellín). **/"""
    return resources.files("geoelectoral").joinpath(SAMPLE_RESOURCE).read_text(encoding="utf-8")
