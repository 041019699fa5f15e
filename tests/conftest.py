"""Shared test fixtures."""

from __future__ import annotations

import os
import shlex
import stat
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from council_fanout.config import FanoutSettings


def echo_agent_template(mode: str = "ok", *, delay: float = 0.0) -> str:
    return (
        f"{shlex.quote(sys.executable)} -m council_fanout.echo_agent "
        f"--mode {mode} --delay {delay} {{prompt}}"
    )


def write_fake_agent(bin_dir: Path, name: str, *, mode: str = "ok") -> Path:
    """Install an executable called ``name`` that behaves like the echo agent."""

    if os.name == "nt":
        pytest.skip("fake agent launchers are POSIX shell scripts")
    bin_dir.mkdir(parents=True, exist_ok=True)
    implementation = bin_dir / f"{name}_impl.py"
    implementation.write_text(
        "import sys\n"
        "from council_fanout.echo_agent import main\n"
        f"sys.exit(main(['--mode', {mode!r}, sys.argv[-1]]))\n",
        "utf-8",
    )
    launcher = bin_dir / name
    launcher.write_text(
        f'#!/bin/sh\nexec "{sys.executable}" "{implementation}" "$@"\n',
        "utf-8",
    )
    launcher.chmod(launcher.stat().st_mode | stat.S_IXUSR)
    return launcher


@pytest.fixture()
def context_file(tmp_path: Path) -> Path:
    path = tmp_path / "council-abc123-context.md"
    path.write_text("# Change under review\n\ndef add(a, b):\n    return a - b\n", "utf-8")
    return path


@pytest.fixture()
def echo_settings() -> Callable[..., FanoutSettings]:
    """Build settings where every agent runs the echo agent in the given mode."""

    def _build(
        *,
        codex: str = "ok",
        gemini: str = "ok",
        claude: str = "ok",
        delays: dict[str, float] | None = None,
        timeout_seconds: int = 60,
    ) -> FanoutSettings:
        delays = delays or {}
        return FanoutSettings(
            timeout_seconds=timeout_seconds,
            poll_interval_seconds=0.02,
            command_templates={
                "codex": echo_agent_template(codex, delay=delays.get("codex", 0.0)),
                "gemini": echo_agent_template(gemini, delay=delays.get("gemini", 0.0)),
                "claude": echo_agent_template(claude, delay=delays.get("claude", 0.0)),
            },
        )

    return _build


@pytest.fixture()
def fake_bin(tmp_path: Path, monkeypatch) -> Path:
    """Empty bin directory that is the only entry on PATH."""

    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("PATH", str(bin_dir))
    for name in list(os.environ):
        if name.startswith("COUNCIL_FANOUT_"):
            monkeypatch.delenv(name, raising=False)
    return bin_dir


@pytest.fixture()
def install_agent(fake_bin: Path) -> Callable[..., Path]:
    """Install fake agent executables into the PATH-only ``fake_bin`` directory."""

    def _install(name: str, *, mode: str = "ok") -> Path:
        return write_fake_agent(fake_bin, name, mode=mode)

    return _install
