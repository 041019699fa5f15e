"""Join point that waits for every launched agent process."""

from __future__ import annotations

import logging
import subprocess
import time
from collections.abc import Iterator

from council_fanout.models import AgentTask, TaskExit

logger = logging.getLogger(__name__)

TIMEOUT_EXIT_CODE = 124
_TERMINATE_GRACE_SECONDS = 2


def iter_completed(
    tasks: list[AgentTask],
    *,
    timeout_seconds: float | None = None,
    poll_interval: float = 0.1,
) -> Iterator[tuple[AgentTask, TaskExit]]:
    """Yield ``(task, exit)`` pairs in completion order until all tasks resolved.

    Every handle is polled on each pass, so a slow agent never gates the
    resolution of a faster one. With ``timeout_seconds=None`` a hung agent
    blocks indefinitely.
    """

    pending: list[tuple[AgentTask, subprocess.Popen[bytes]]] = []
    for task in tasks:
        if task.process is None:
            yield task, TaskExit(
                exit_code=None,
                elapsed_seconds=0.0,
                wait_error=task.launch_error or "process was not started",
            )
            continue
        pending.append((task, task.process))

    while pending:
        still_running: list[tuple[AgentTask, subprocess.Popen[bytes]]] = []
        for task, process in pending:
            task_exit = _check(task, process, timeout_seconds=timeout_seconds)
            if task_exit is None:
                still_running.append((task, process))
                continue
            yield task, task_exit
        pending = still_running
        if pending:
            time.sleep(poll_interval)


def wait_all(
    tasks: list[AgentTask],
    *,
    timeout_seconds: float | None = None,
    poll_interval: float = 0.1,
) -> dict[str, TaskExit]:
    """Block until every task resolved; exits are keyed by agent name."""

    return {
        task.agent: task_exit
        for task, task_exit in iter_completed(
            tasks,
            timeout_seconds=timeout_seconds,
            poll_interval=poll_interval,
        )
    }


def _check(
    task: AgentTask,
    process: subprocess.Popen[bytes],
    *,
    timeout_seconds: float | None,
) -> TaskExit | None:
    elapsed = time.monotonic() - task.started_monotonic
    try:
        returncode = process.poll()
    except OSError as error:
        logger.error("Could not reap agent=%s: %s", task.agent, error)
        return TaskExit(exit_code=None, elapsed_seconds=elapsed, wait_error=str(error))

    if returncode is not None:
        logger.info("Agent=%s exited code=%s after %.1fs", task.agent, returncode, elapsed)
        return TaskExit(exit_code=returncode, elapsed_seconds=elapsed)

    if timeout_seconds is not None and elapsed >= timeout_seconds:
        logger.warning("Agent=%s timed out after %.1fs; terminating", task.agent, elapsed)
        _terminate_process(process)
        return TaskExit(
            exit_code=TIMEOUT_EXIT_CODE,
            elapsed_seconds=elapsed,
            timed_out=True,
        )
    return None


def _terminate_process(process: subprocess.Popen[bytes]) -> None:
    try:
        process.terminate()
    except OSError:
        return
    try:
        process.wait(timeout=_TERMINATE_GRACE_SECONDS)
    except subprocess.TimeoutExpired:
        try:
            process.kill()
        except OSError:
            return
        process.wait(timeout=_TERMINATE_GRACE_SECONDS)
