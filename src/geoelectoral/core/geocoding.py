"""Georreferenciación aproximada por centroide de comuna.

Cuando un puesto no trae coordenadas válidas se ubica en el centroide de su
comuna (o en el centro de la ciudad) con un desplazamiento aleatorio para que
puestos de la misma comuna sigan siendo distinguibles en el mapa.

English:
    Approximate geocoding from comuna centroids. Stations without valid
    coordinates are placed at their comuna centroid (or the city center) plus
    a random offset so co-located stations remain individually selectable.
"""

from __future__ import annotations

import logging
import math
import random
import re
from typing import Mapping, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)

_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

DEFAULT_COMUNA_JITTER = 0.003
DEFAULT_CITY_JITTER = 0.01


class GeoResolution(NamedTuple):
    lat: float
    lng: float
    is_approximate: bool


def parse_coordinate(raw: Optional[str]) -> Optional[float]:
    """Lee el prefijo numérico de una celda; ``None`` si no es finito.

    English:
        Parse the leading numeric prefix of a cell (``"6.25abc"`` -> 6.25).
        Returns ``None`` for empty, non-numeric or non-finite values.
    """
    if raw is None:
        return None
    match = _FLOAT_PREFIX.match(raw)
    if not match:
        return None
    value = float(match.group(0))
    if not math.isfinite(value):
        return None
    return value


class GeocodingResolver:
    """Resuelve ``(lat, lng, aproximado)`` con una fuente aleatoria inyectada.

    English:
        Resolves ``(lat, lng, is_approximate)`` using an injected random
        source. Seed the ``random.Random`` to get reproducible coordinates.
    """

    def __init__(
        self,
        centroids: Mapping[str, Tuple[float, float]],
        city_center: Tuple[float, float],
        *,
        comuna_jitter: float = DEFAULT_COMUNA_JITTER,
        city_jitter: float = DEFAULT_CITY_JITTER,
        rng: random.Random | None = None,
    ) -> None:
        self.centroids = dict(centroids)
        self.city_center = city_center
        self.comuna_jitter = comuna_jitter
        self.city_jitter = city_jitter
        self.rng = rng or random.Random()

    def find_centroid(self, comuna_name: str) -> Optional[Tuple[float, float]]:
        """Centroide por clave exacta o, si no, primera clave contenida en el nombre.

        English:
            Centroid for the exact normalized key, else for the first table
            key (definition order) that is a substring of the comuna name.
        """
        normalized = comuna_name.lower().strip()
        if normalized in self.centroids:
            return self.centroids[normalized]
        for key, centroid in self.centroids.items():
            if key in normalized:
                return centroid
        return None

    def _jitter(self, radius: float) -> float:
        return (self.rng.random() - 0.5) * 2 * radius

    def resolve(
        self,
        comuna_name: str,
        raw_lat: Optional[str],
        raw_lng: Optional[str],
    ) -> GeoResolution:
        lat = parse_coordinate(raw_lat)
        lng = parse_coordinate(raw_lng)
        if lat is not None and lng is not None and not (lat == 0 and lng == 0):
            return GeoResolution(lat, lng, False)

        centroid = self.find_centroid(comuna_name)
        if centroid is not None:
            radius = self.comuna_jitter
        else:
            # Ciudad completa: desplazamiento más amplio. / Whole city: wider offset.
            logger.debug("geocoding_city_fallback comuna=%s", comuna_name)
            centroid = self.city_center
            radius = self.city_jitter

        base_lat, base_lng = centroid
        return GeoResolution(base_lat + self._jitter(radius), base_lng + self._jitter(radius), True)
