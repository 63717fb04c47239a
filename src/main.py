"""Ejecuta ppsync con `python src/main.py` (mismo comando que el script `ppsync`).

`pac` escribe rutas y nombres de solución con caracteres no ASCII; en consolas
Windows con cp1252 Rich fallaría al volcarlos, así que se fuerza UTF-8.
"""

from __future__ import annotations

import sys

# cp1252 consoles cannot encode pac's output or Rich's box characters.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run  # noqa: E402

if __name__ == "__main__":
    run()
