"""Colores por partido e iniciales de candidatos.

English:
    Party colors and candidate avatar initials.
"""

from __future__ import annotations

from typing import Mapping


def color_for_party(party: str, party_colors: Mapping[str, str], default_color: str) -> str:
    """/** Color del partido normalizado o color por defecto. / Normalized party color or default. **/"""
    return party_colors.get(party.lower().strip(), default_color)


def avatar_initials(name: str) -> str:
    """/** Primeros dos caracteres del nombre en mayúscula. / First two characters, uppercased. **/"""
    return name[:2].upper()
