"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

import pytest

from core.config import AppSettings
from core.domain.models import CommandResult

WIDGETS_LISTING = """Connected as admin@contoso.onmicrosoft.com
Connected to... Contoso Dev

Default solution Unique Name: Default
Widgets (1.0.0.3) Unique Name: spl_widgets
Gadgets (2.1.0.0) Unique Name: spl_gadgets
"""

TABLE_LISTING = """Connected as admin@contoso.onmicrosoft.com
Connected to... Contoso Dev

Unique Name       Friendly Name                 Version    Managed
Default           Common Data Services Default  1.0        False
spl_widgets       Widgets                       1.0.0.3    False
spl_widgets_ext   Widgets Extensions            1.2.0.0    True
"""


class FakeRunner:
    """Records every invocation and simulates `pac` side effects on disk."""

    def __init__(
        self,
        *,
        listing: str = WIDGETS_LISTING,
        fail_on: Optional[str] = None,
        unpack_files: Optional[Dict[str, str]] = None,
        on_call: Optional[Callable[[List[str]], None]] = None,
    ) -> None:
        self.listing = listing
        self.fail_on = fail_on
        self.unpack_files = unpack_files if unpack_files is not None else {"Other/Solution.xml": "<ImportExportXml/>"}
        self.on_call = on_call
        self.calls: List[List[str]] = []
        self.commands: List[str] = []

    def verbs(self) -> List[str]:
        return [" ".join(call[:2]) for call in self.calls]

    def run(self, command: str, args: Sequence[str], cwd: Optional[Path] = None) -> CommandResult:
        args = list(args)
        self.calls.append(args)
        self.commands.append(command)
        if self.on_call:
            self.on_call(args)

        verb = " ".join(args[:2])
        if self.fail_on and verb == self.fail_on:
            return CommandResult(command=command, args=args, exit_code=1, stderr=f"Error: {verb} rejected")

        stdout = ""
        if verb == "solution list":
            stdout = self.listing
        elif verb == "solution export":
            path = Path(args[args.index("--path") + 1])
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"PK\x05\x06" + b"\x00" * 18)
        elif verb == "solution unpack":
            folder = Path(args[args.index("--folder") + 1])
            for relative, content in self.unpack_files.items():
                target = folder / relative
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(content, encoding="utf-8")
        elif verb == "canvas unpack":
            sources = Path(args[args.index("--sources") + 1])
            sources.mkdir(parents=True, exist_ok=True)
            (sources / "Src").mkdir(exist_ok=True)
            (sources / "Src" / "App.fx.yaml").write_text("App As appinfo:\n", encoding="utf-8")
        return CommandResult(command=command, args=args, exit_code=0, stdout=stdout)


@pytest.fixture
def settings() -> AppSettings:
    """Settings isolated from any .env file on the machine."""
    return AppSettings(_env_file=None)


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    root = tmp_path / "repo"
    root.mkdir()
    return root


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def which_found() -> Callable[[str], Optional[str]]:
    return lambda name: f"/usr/local/bin/{name}"


@pytest.fixture
def which_missing() -> Callable[[str], Optional[str]]:
    return lambda name: None
