"""Interfaz de línea de comandos.

English:
    Command line interface: ingest a results file and print the dataset or a
    filtered summary as JSON.
"""

from __future__ import annotations

import json
import random
from pathlib import Path
from typing import Any, Optional

import typer

from geoelectoral.config import load_reference_tables, load_settings
from geoelectoral.core.aggregate import aggregate, rank_candidates, votes_by_comuna
from geoelectoral.core.export import dataset_to_dict, summary_to_dict
from geoelectoral.core.ingest import IngestionEngine
from geoelectoral.core.models import AggregateFilter, Dataset
from geoelectoral.errors import ConfigurationError
from geoelectoral.logging import setup_logging
from geoelectoral.sources import load_sample, read_results_file

app = typer.Typer(help="Geoelectoral ingestion engine CLI")

SeedOption = typer.Option(None, "--seed", help="Semilla para el desplazamiento aleatorio / jitter seed.")
ReferenceOption = typer.Option(None, "--reference", help="YAML de tablas de referencia / reference tables YAML.")
ComunaOption = typer.Option(None, "--comuna", help="Filtrar por comuna / filter by comuna.")
CorporationOption = typer.Option(None, "--corporation", help="Filtrar por corporación / filter by corporation.")


def _load_dataset(raw_text: Optional[str], path: Optional[Path], seed: Optional[int], reference: Optional[Path]) -> Dataset:
    try:
        settings = load_settings()
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    logger = setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)
    seed = seed if seed is not None else settings.GEOCODING_SEED
    reference_path = reference or settings.REFERENCE_TABLES_PATH

    try:
        tables = load_reference_tables(reference_path)
        if raw_text is None:
            raw_text = read_results_file(path)
        engine = IngestionEngine(tables, rng=random.Random(seed))
        dataset = engine.ingest(raw_text)
    except (ConfigurationError, FileNotFoundError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    logger = logger.bind(source_file=str(path) if path else "sample", reference=tables.name, seed=seed)
    logger.info(
        "dataset_loaded",
        stations=dataset.load_report.total,
        candidates=len(dataset.candidates),
        summary=dataset.load_report.summary(),
    )
    return dataset


def _summary(dataset: Dataset, comuna: Optional[str], corporation: Optional[str]) -> dict[str, Any]:
    result = aggregate(dataset, AggregateFilter(comuna=comuna, corporation=corporation))
    return summary_to_dict(
        result,
        rank_candidates(dataset, result),
        votes_by_comuna(dataset, corporation),
    )


def _emit(payload: dict[str, Any], output: Optional[Path] = None) -> None:
    text = json.dumps(payload, ensure_ascii=False, indent=2)
    if output is None:
        typer.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")


@app.command()
def ingest(
    path: Path = typer.Argument(..., help="CSV de resultados / results CSV."),
    seed: Optional[int] = SeedOption,
    reference: Optional[Path] = ReferenceOption,
    output: Optional[Path] = typer.Option(None, "--output", help="Archivo JSON de salida / output JSON file."),
) -> None:
    """Ingiere un CSV y emite el dataset normalizado.

    English: Ingest a CSV and emit the normalized dataset.
    """
    dataset = _load_dataset(None, path, seed, reference)
    _emit(dataset_to_dict(dataset), output)


@app.command()
def summary(
    path: Path = typer.Argument(..., help="CSV de resultados / results CSV."),
    comuna: Optional[str] = ComunaOption,
    corporation: Optional[str] = CorporationOption,
    seed: Optional[int] = SeedOption,
    reference: Optional[Path] = ReferenceOption,
) -> None:
    """Totales, participación, ranking y distribución zonal.

    English: Totals, turnout, ranking and zone distribution.
    """
    dataset = _load_dataset(None, path, seed, reference)
    _emit(_summary(dataset, comuna, corporation))


@app.command()
def sample(
    comuna: Optional[str] = ComunaOption,
    corporation: Optional[str] = CorporationOption,
    seed: Optional[int] = SeedOption,
) -> None:
    """Resumen de los resultados de ejemplo. / Summary of the bundled sample."""
    dataset = _load_dataset(load_sample(), None, seed, None)
    _emit(_summary(dataset, comuna, corporation))


if __name__ == "__main__":
    app()
