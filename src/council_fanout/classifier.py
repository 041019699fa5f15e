"""Deterministic outcome classification for one terminated agent."""

from __future__ import annotations

from pathlib import Path

from council_fanout.models import AgentOutcome, AgentResult, TaskExit

DEFAULT_EMPTY_THRESHOLD_BYTES = 10


def classify_outcome(
    *,
    agent: str,
    task_exit: TaskExit,
    output_path: Path,
    empty_threshold_bytes: int = DEFAULT_EMPTY_THRESHOLD_BYTES,
) -> AgentResult:
    """Classify an exited agent.

    Order matters: a failed process stays a failure whatever it left on disk,
    and a clean exit with no meaningful bytes is still a failure.
    """

    size_bytes, line_count = _output_stats(output_path)
    common = {
        "agent": agent,
        "exit_code": task_exit.exit_code,
        "output_path": output_path,
        "size_bytes": size_bytes,
        "line_count": line_count,
        "elapsed_seconds": task_exit.elapsed_seconds,
    }

    if task_exit.wait_error is not None:
        return AgentResult(
            outcome=AgentOutcome.PROCESS_FAILURE,
            reason=f"failed ({task_exit.wait_error})",
            **common,
        )
    if task_exit.timed_out:
        return AgentResult(
            outcome=AgentOutcome.PROCESS_FAILURE,
            reason=f"timed out after {task_exit.elapsed_seconds:.0f}s",
            **common,
        )
    if task_exit.exit_code is None or task_exit.exit_code != 0:
        return AgentResult(
            outcome=AgentOutcome.PROCESS_FAILURE,
            reason=f"failed (exit code {task_exit.exit_code})",
            **common,
        )
    if size_bytes is None or size_bytes <= empty_threshold_bytes:
        return AgentResult(
            outcome=AgentOutcome.EMPTY_OUTPUT,
            reason="returned empty/near-empty output",
            **common,
        )
    return AgentResult(
        outcome=AgentOutcome.SUCCESS,
        reason="done",
        **common,
    )


def skipped_result(agent: str, reason: str) -> AgentResult:
    return AgentResult(agent=agent, outcome=AgentOutcome.SKIPPED, reason=reason)


def _output_stats(path: Path) -> tuple[int | None, int | None]:
    if not path.is_file():
        return None, None
    data = path.read_bytes()
    return len(data), data.count(b"\n")
