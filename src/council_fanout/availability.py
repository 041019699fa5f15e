"""Eligibility check run before an agent is launched."""

from __future__ import annotations

import shutil
from dataclasses import dataclass

from council_fanout.models import AgentSpec


@dataclass(frozen=True, slots=True)
class Availability:
    """Whether one agent may be launched, and why not if it may not."""

    agent: str
    eligible: bool
    reason: str
    resolved_executable: str | None = None


def check_availability(spec: AgentSpec, disabled_agents: frozenset[str]) -> Availability:
    """Return eligibility for ``spec``; ineligibility is a normal result, not an error."""

    if spec.name in disabled_agents:
        return Availability(agent=spec.name, eligible=False, reason="disabled by flag")

    executable = spec.executable
    resolved = shutil.which(executable) if executable else None
    if resolved is None:
        return Availability(
            agent=spec.name,
            eligible=False,
            reason=f"{executable or spec.name} not found on PATH",
        )
    return Availability(
        agent=spec.name,
        eligible=True,
        reason="available",
        resolved_executable=resolved,
    )
