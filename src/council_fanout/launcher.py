"""Non-blocking launch of one agent process per eligible agent."""

from __future__ import annotations

import errno
import logging
import os
import shlex
import subprocess
import time
from pathlib import Path
from typing import BinaryIO

from council_fanout.models import AgentSpec, AgentTask

logger = logging.getLogger(__name__)

OUTPUT_EXTENSION = ".txt"


class LaunchError(RuntimeError):
    """Agent command could not be rendered or started."""


def output_path_for(output_dir: Path, invocation_id: str, agent: str) -> Path:
    """Deterministic per-agent output path shared by launcher and reporter."""

    return output_dir / f"{invocation_id}-{agent}{OUTPUT_EXTENSION}"


def build_prompt(
    *,
    spec: AgentSpec,
    context_file: Path,
    review_prompt: str,
    inline_max_bytes: int,
    by_path: bool = False,
) -> str:
    """Embed small context files inline; point the agent at large ones."""

    if not by_path and spec.inline_context and context_file.stat().st_size <= inline_max_bytes:
        context_text = context_file.read_text("utf-8", errors="replace")
        return f"{review_prompt}\n\n{context_text}"
    return f"Read the file {context_file} and review it. {review_prompt}"


def build_run_args(
    *,
    command_template: str,
    prompt: str,
    context_file: Path,
    resolved_executable: str | None = None,
    os_name: str | None = None,
) -> str | list[str]:
    stripped = command_template.strip()
    if not stripped:
        raise LaunchError("Agent command template is empty.")
    if "{prompt}" not in stripped:
        raise LaunchError("Agent command template must include {prompt}.")

    current_os_name = os_name or os.name
    quote = _quote_windows if current_os_name == "nt" else shlex.quote
    try:
        rendered = stripped.format(
            prompt=quote(prompt),
            context_file=quote(str(context_file)),
        )
    except (KeyError, IndexError) as error:
        raise LaunchError(f"Unsupported command template placeholder: {error}") from error

    if current_os_name == "nt":
        head, _, tail = rendered.partition(" ")
        if resolved_executable is not None:
            head = _quote_windows(resolved_executable)
        return f"{head} {tail}".strip()

    argv = shlex.split(rendered)
    if not argv:
        raise LaunchError("Agent command template rendered empty command.")
    if resolved_executable is not None:
        argv[0] = resolved_executable
    return argv


def launch_agent(  # noqa: PLR0913
    spec: AgentSpec,
    *,
    context_file: Path,
    output_path: Path,
    review_prompt: str,
    inline_max_bytes: int,
    resolved_executable: str | None = None,
) -> AgentTask:
    """Start ``spec`` in the background with stdout redirected to ``output_path``.

    Never waits on the child. Spawn errors are kept on the returned task so the
    waiter can resolve it as a process failure without touching sibling agents.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)
    started = time.monotonic()
    env = os.environ.copy()
    env.update(spec.env_overrides)

    with output_path.open("wb") as stdout_handle:
        try:
            try:
                process = _spawn(
                    spec,
                    prompt=build_prompt(
                        spec=spec,
                        context_file=context_file,
                        review_prompt=review_prompt,
                        inline_max_bytes=inline_max_bytes,
                    ),
                    context_file=context_file,
                    resolved_executable=resolved_executable,
                    env=env,
                    stdout_handle=stdout_handle,
                )
            except OSError as error:
                # a single argv string is capped by the OS (MAX_ARG_STRLEN on Linux)
                if error.errno != errno.E2BIG or not spec.inline_context:
                    raise
                logger.warning(
                    "Inline prompt too long for agent=%s; passing context by path",
                    spec.name,
                )
                process = _spawn(
                    spec,
                    prompt=build_prompt(
                        spec=spec,
                        context_file=context_file,
                        review_prompt=review_prompt,
                        inline_max_bytes=inline_max_bytes,
                        by_path=True,
                    ),
                    context_file=context_file,
                    resolved_executable=resolved_executable,
                    env=env,
                    stdout_handle=stdout_handle,
                )
        except (LaunchError, OSError) as error:
            logger.error("Failed to launch agent=%s: %s", spec.name, error)
            return AgentTask(
                spec=spec,
                output_path=output_path,
                process=None,
                started_monotonic=started,
                launch_error=str(error),
            )

    logger.info("Launched agent=%s pid=%s output=%s", spec.name, process.pid, output_path)
    return AgentTask(
        spec=spec,
        output_path=output_path,
        process=process,
        started_monotonic=started,
    )


def _spawn(  # noqa: PLR0913
    spec: AgentSpec,
    *,
    prompt: str,
    context_file: Path,
    resolved_executable: str | None,
    env: dict[str, str],
    stdout_handle: BinaryIO,
) -> subprocess.Popen[bytes]:
    run_args = build_run_args(
        command_template=spec.command_template,
        prompt=prompt,
        context_file=context_file,
        resolved_executable=resolved_executable,
    )
    return subprocess.Popen(  # noqa: S603
        run_args,
        cwd=spec.cwd,
        env=env,
        stdin=subprocess.DEVNULL,
        stdout=stdout_handle,
        stderr=subprocess.STDOUT if spec.capture_stderr else subprocess.DEVNULL,
    )


def _quote_windows(value: str) -> str:
    return subprocess.list2cmdline([value])
