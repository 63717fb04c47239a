"""Exportación JSON del resumen de ejecución.

Por qué JSON:
- Interoperabilidad con pipelines de CI que quieran saber qué zip se generó.
- Permite persistir el resultado sin depender de la salida Rich de la consola.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import SyncResult


def export_sync_json(*, result: SyncResult, output_path: Path) -> Path:
    """Exporta `SyncResult` a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = result.model_dump(mode="json")
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
