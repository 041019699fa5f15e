"""Domain models for one fan-out invocation."""

from __future__ import annotations

import shlex
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class AgentOutcome(str, Enum):
    """Classified terminal state of one agent."""

    SUCCESS = "success"
    EMPTY_OUTPUT = "empty_output"
    PROCESS_FAILURE = "process_failure"
    SKIPPED = "skipped"

    @property
    def is_failure(self) -> bool:
        return self in {AgentOutcome.EMPTY_OUTPUT, AgentOutcome.PROCESS_FAILURE}


@dataclass(frozen=True, slots=True)
class AgentSpec:
    """Registry entry describing how to invoke one external agent."""

    name: str
    command_template: str
    inline_context: bool = True
    capture_stderr: bool = True
    cwd: Path | None = None
    env_overrides: dict[str, str] = field(default_factory=dict)

    @property
    def executable(self) -> str:
        try:
            argv = shlex.split(self.command_template)
        except ValueError:
            return ""
        return argv[0] if argv else ""


@dataclass(slots=True)
class InvocationRequest:
    """Caller input for one fan-out run."""

    context_file: Path
    disabled_agents: frozenset[str] = frozenset()
    invocation_id: str | None = None
    output_dir: Path | None = None


@dataclass(slots=True)
class AgentTask:
    """One launched agent process and the file it writes."""

    spec: AgentSpec
    output_path: Path
    process: subprocess.Popen[bytes] | None
    started_monotonic: float
    launch_error: str | None = None

    @property
    def agent(self) -> str:
        return self.spec.name


@dataclass(frozen=True, slots=True)
class TaskExit:
    """Terminal status recorded by the completion waiter."""

    exit_code: int | None
    elapsed_seconds: float
    wait_error: str | None = None
    timed_out: bool = False


@dataclass(frozen=True, slots=True)
class AgentResult:
    """Typed per-agent result returned from the orchestrator."""

    agent: str
    outcome: AgentOutcome
    reason: str
    exit_code: int | None = None
    output_path: Path | None = None
    size_bytes: int | None = None
    line_count: int | None = None
    elapsed_seconds: float | None = None


@dataclass(frozen=True, slots=True)
class InvocationReport:
    """Aggregate of all agent results for one invocation."""

    invocation_id: str
    context_file: Path
    results: tuple[AgentResult, ...]

    @property
    def launched_count(self) -> int:
        return sum(1 for result in self.results if result.outcome != AgentOutcome.SKIPPED)

    @property
    def failure_count(self) -> int:
        return sum(1 for result in self.results if result.outcome.is_failure)

    @property
    def success_count(self) -> int:
        return sum(1 for result in self.results if result.outcome == AgentOutcome.SUCCESS)

    @property
    def failed_agents(self) -> tuple[str, ...]:
        return tuple(result.agent for result in self.results if result.outcome.is_failure)

    @property
    def output_paths(self) -> tuple[Path, ...]:
        return tuple(
            result.output_path
            for result in self.results
            if result.output_path is not None and result.output_path.exists()
        )

    @property
    def exit_status(self) -> int:
        return self.failure_count

    def result_for(self, agent: str) -> AgentResult:
        for result in self.results:
            if result.agent == agent:
                return result
        raise KeyError(agent)
