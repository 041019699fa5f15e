"""Known review agents in declared launch order."""

from __future__ import annotations

import tempfile
from pathlib import Path

from council_fanout.config import FanoutSettings
from council_fanout.models import AgentSpec

SUPPORTED_AGENTS = ("codex", "gemini", "claude")


def build_registry(settings: FanoutSettings) -> tuple[AgentSpec, ...]:
    """Return agent specs in launch order with templates taken from settings."""

    templates = settings.command_templates
    for agent in SUPPORTED_AGENTS:
        if not templates.get(agent, "").strip():
            raise ValueError(f"Empty command template for agent={agent!r}")

    return (
        # codex reads the context file itself and runs outside any git checkout
        AgentSpec(
            name="codex",
            command_template=templates["codex"],
            inline_context=False,
            capture_stderr=False,
            cwd=Path(tempfile.gettempdir()),
        ),
        AgentSpec(
            name="gemini",
            command_template=templates["gemini"],
        ),
        # empty CLAUDECODE lets claude start from inside another claude session
        AgentSpec(
            name="claude",
            command_template=templates["claude"],
            env_overrides={"CLAUDECODE": ""},
        ),
    )


def validate_agent_names(names: frozenset[str] | set[str]) -> None:
    unknown = sorted(name for name in names if name not in SUPPORTED_AGENTS)
    if unknown:
        raise ValueError(
            f"Unsupported agent(s): {', '.join(unknown)}. Use codex, gemini, or claude.",
        )
