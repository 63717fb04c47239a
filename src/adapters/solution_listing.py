"""Parseo de la salida de `pac solution list`.

`pac` no ofrece salida JSON para este verbo, así que hay dos estrategias:
- Tabular: cabecera con columnas `Unique Name` / `Friendly Name` alineadas por
  posición. Es la forma estructurada y se intenta primero.
- Etiqueta: una línea libre que contiene el nombre visible y `Unique Name: <id>`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from core.domain.models import SolutionListingEntry

_LABEL_RE = re.compile(r"Unique Name:\s*(\S+)", re.IGNORECASE)

_COLUMNS = {
    "Unique Name": "unique_name",
    "Friendly Name": "friendly_name",
    "Version": "version",
    "Managed": "managed",
}


@dataclass
class ListingMatch:
    """Resultado de buscar un nombre visible en el listado."""

    line: str
    unique_name: str | None
    via: str  # "table" | "label" | "none"


def _find_header(lines: list[str]) -> int | None:
    for index, line in enumerate(lines):
        if "Unique Name" in line and "Friendly Name" in line and "Unique Name:" not in line:
            return index
    return None


def _table_rows(lines: list[str]) -> dict[int, SolutionListingEntry]:
    """Filas tabulares indexadas por número de línea (vacío si no hay cabecera)."""

    header_index = _find_header(lines)
    if header_index is None:
        return {}

    header = lines[header_index]
    offsets = sorted(
        (header.index(title), field_name) for title, field_name in _COLUMNS.items() if title in header
    )

    rows: dict[int, SolutionListingEntry] = {}
    for index in range(header_index + 1, len(lines)):
        line = lines[index]
        if not line.strip() or set(line.strip()) <= {"-", " "}:
            continue
        values: dict[str, str] = {}
        for position, (start, field_name) in enumerate(offsets):
            end = offsets[position + 1][0] if position + 1 < len(offsets) else None
            values[field_name] = line[start:end].strip()
        unique_name = values.get("unique_name", "")
        if not unique_name or " " in unique_name:
            continue
        managed_raw = values.get("managed", "").lower()
        rows[index] = SolutionListingEntry(
            unique_name=unique_name,
            friendly_name=values.get("friendly_name", ""),
            version=values.get("version") or None,
            managed={"true": True, "false": False}.get(managed_raw),
        )
    return rows


def parse_listing_table(text: str) -> list[SolutionListingEntry]:
    """Parsea el listado tabular. Devuelve lista vacía si no hay cabecera reconocible."""

    return list(_table_rows(text.splitlines()).values())


def extract_unique_name(line: str) -> str | None:
    """Extrae el identificador de una etiqueta `Unique Name: <id>`."""

    m = _LABEL_RE.search(line)
    if not m:
        return None
    return m.group(1).strip() or None


def find_solution(text: str, display_name: str) -> ListingMatch | None:
    """Busca `display_name` en el listado.

    Orden:
    1) fila tabular cuyo Friendly Name coincide exactamente (sin distinguir mayúsculas)
    2) primera línea que contiene el nombre; si es una fila tabular se usa su
       columna Unique Name, si no la etiqueta `Unique Name:` cuando exista

    Devuelve None si ninguna línea contiene el nombre.
    """

    needle = display_name.strip().lower()
    if not needle:
        return None

    lines = text.splitlines()
    rows = _table_rows(lines)
    for index, entry in rows.items():
        if entry.friendly_name.lower() == needle:
            return ListingMatch(line=lines[index], unique_name=entry.unique_name, via="table")

    header_index = _find_header(lines)
    for index, line in enumerate(lines):
        if index == header_index or needle not in line.lower():
            continue
        if index in rows:
            return ListingMatch(line=line, unique_name=rows[index].unique_name, via="table")
        unique_name = extract_unique_name(line)
        return ListingMatch(line=line, unique_name=unique_name, via="label" if unique_name else "none")
    return None
