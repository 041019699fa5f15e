"""Fan one context file out to every eligible review agent and join the results."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path

from council_fanout.agents import build_registry, validate_agent_names
from council_fanout.availability import check_availability
from council_fanout.classifier import classify_outcome, skipped_result
from council_fanout.config import FanoutSettings
from council_fanout.launcher import launch_agent, output_path_for
from council_fanout.models import AgentResult, AgentTask, InvocationReport, InvocationRequest
from council_fanout.reporter import build_report, describe_result
from council_fanout.waiter import iter_completed

logger = logging.getLogger(__name__)

_CONTEXT_SUFFIX = "-context.md"


class ConfigurationError(ValueError):
    """Invocation cannot start: bad context file, settings, or no eligible agent."""


def derive_invocation_id(context_file: Path) -> str:
    """``council-abc123-context.md`` -> ``council-abc123``; else drop ``.md``/``.txt``."""

    name = context_file.name
    if name.endswith(_CONTEXT_SUFFIX) and len(name) > len(_CONTEXT_SUFFIX):
        return name[: -len(_CONTEXT_SUFFIX)]
    for suffix in (".md", ".txt"):
        if name.endswith(suffix) and len(name) > len(suffix):
            name = name[: -len(suffix)]
    return name


def validate_context_file(context_file: Path) -> None:
    if not context_file.exists():
        raise ConfigurationError(f"Context file not found: {context_file}")
    if not context_file.is_file():
        raise ConfigurationError(f"Context path is not a regular file: {context_file}")
    if not os.access(context_file, os.R_OK):
        raise ConfigurationError(f"Context file is not readable: {context_file}")


def prepare_output_dir(output_dir: Path) -> None:
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise ConfigurationError(f"Cannot create output directory {output_dir}: {error}") from error
    if not os.access(output_dir, os.W_OK | os.X_OK):
        raise ConfigurationError(f"Output directory is not writable: {output_dir}")


class FanoutOrchestrator:
    """Launch, join, classify and report for one invocation at a time."""

    def __init__(
        self,
        settings: FanoutSettings,
        *,
        on_event: Callable[[str], None] | None = None,
    ) -> None:
        try:
            settings.validate()
            self._registry = build_registry(settings)
        except ValueError as error:
            raise ConfigurationError(str(error)) from error
        self._settings = settings
        self._on_event = on_event or (lambda _msg: None)

    @property
    def agent_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self._registry)

    def run(self, request: InvocationRequest) -> InvocationReport:
        """Run every eligible agent to completion and return the frozen report.

        Raises ConfigurationError before launching anything when the context
        file or output directory is unusable, or no agent is eligible.
        """

        try:
            validate_agent_names(request.disabled_agents)
        except ValueError as error:
            raise ConfigurationError(str(error)) from error
        context_file = request.context_file.resolve()
        validate_context_file(context_file)

        invocation_id = request.invocation_id or derive_invocation_id(context_file)
        output_dir = request.output_dir or self._settings.output_dir or context_file.parent
        prepare_output_dir(output_dir)

        results: list[AgentResult] = []
        eligible = []
        for spec in self._registry:
            availability = check_availability(spec, request.disabled_agents)
            if availability.eligible:
                eligible.append((spec, availability.resolved_executable))
                continue
            logger.info("Skipping agent=%s: %s", spec.name, availability.reason)
            self._on_event(f"SKIP: {availability.reason}")
            results.append(skipped_result(spec.name, availability.reason))

        if not eligible:
            raise ConfigurationError("No agents launched: every agent is disabled or unavailable.")

        tasks: list[AgentTask] = []
        for spec, resolved_executable in eligible:
            self._on_event(f"Launching {spec.name}...")
            tasks.append(
                launch_agent(
                    spec,
                    context_file=context_file,
                    output_path=output_path_for(output_dir, invocation_id, spec.name),
                    review_prompt=self._settings.review_prompt,
                    inline_max_bytes=self._settings.inline_max_bytes,
                    resolved_executable=resolved_executable,
                ),
            )

        self._on_event(
            f"Waiting for {len(tasks)} agent(s): {' '.join(task.agent for task in tasks)}",
        )
        for task, task_exit in iter_completed(
            tasks,
            timeout_seconds=self._settings.effective_timeout,
            poll_interval=self._settings.poll_interval_seconds,
        ):
            result = classify_outcome(
                agent=task.agent,
                task_exit=task_exit,
                output_path=task.output_path,
                empty_threshold_bytes=self._settings.empty_threshold_bytes,
            )
            self._on_event(f"  {describe_result(result)}")
            results.append(result)

        report = build_report(
            invocation_id=invocation_id,
            context_file=context_file,
            results=results,
            agent_order=self.agent_names,
        )
        logger.info(
            "Invocation %s finished: launched=%d failures=%d",
            invocation_id,
            report.launched_count,
            report.failure_count,
        )
        return report
