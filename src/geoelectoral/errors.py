"""Errores del motor de ingesta electoral.

English:
    Error taxonomy for the electoral ingestion engine.
"""

from __future__ import annotations


class IngestionError(Exception):
    """Error base del motor. / Base engine error."""


class ConfigurationError(IngestionError, ValueError):
    """Entrada o configuración inutilizable; la ingesta se aborta.

    English:
        Unusable input or configuration; the ingestion call is aborted and no
        partial dataset is returned.
    """


class RecoverableRowError(IngestionError):
    """Fila defectuosa recuperada localmente por el ingestor.

    English:
        Row-level defect recovered locally by the ingestor. Never surfaced to
        callers, only counted in the load report.
    """

    def __init__(self, reason: str, line_number: int, detail: str = "") -> None:
        self.reason = reason
        self.line_number = line_number
        self.detail = detail
        super().__init__(f"line {line_number}: {reason} {detail}".strip())
