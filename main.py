"""Lanzador de ppsync desde un checkout, sin `pip install -e .`.

Uso:
- `python main.py sync --env-url https://org.crm.dynamics.com --solution-name Widgets`
- `python main.py doctor run`

Los paquetes `cli`, `core` y `adapters` están bajo `src/`; se añade esa ruta
a `sys.path` antes de importar la app de Typer.
"""

from __future__ import annotations

import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parent / "src"


def main() -> None:
    if str(SRC_DIR) not in sys.path:
        sys.path.insert(0, str(SRC_DIR))

    from cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()
