"""Controller behind the fan-out CLI command."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from council_fanout.config import FanoutSettings
from council_fanout.fanout import ConfigurationError, FanoutOrchestrator
from council_fanout.models import InvocationRequest
from council_fanout.reporter import render_summary_lines

CONFIGURATION_ERROR_EXIT_CODE = 78


@dataclass(slots=True)
class FanoutCommand:
    """CLI input for one fan-out run."""

    context_file: Path
    disabled_agents: tuple[str, ...]
    output_dir: Path | None
    invocation_id: str | None
    timeout_seconds: int | None


@dataclass(slots=True)
class FanoutCliResult:
    """Summary lines to render and the process exit status."""

    lines: list[str]
    exit_code: int
    configuration_error: bool = False


class FanoutCliController:
    """Builds settings, runs the orchestrator, and maps the report to an exit code."""

    def run(
        self,
        command: FanoutCommand,
        *,
        on_event: Callable[[str], None] | None = None,
    ) -> FanoutCliResult:
        try:
            settings = FanoutSettings.from_env(output_dir=command.output_dir)
            if command.timeout_seconds is not None:
                settings.timeout_seconds = command.timeout_seconds
            orchestrator = FanoutOrchestrator(settings, on_event=on_event)
            report = orchestrator.run(
                InvocationRequest(
                    context_file=command.context_file,
                    disabled_agents=frozenset(command.disabled_agents),
                    invocation_id=command.invocation_id,
                    output_dir=command.output_dir,
                ),
            )
        except (ConfigurationError, ValueError) as error:
            return FanoutCliResult(
                lines=[f"ERROR: {error}"],
                exit_code=CONFIGURATION_ERROR_EXIT_CODE,
                configuration_error=True,
            )

        return FanoutCliResult(
            lines=render_summary_lines(report),
            exit_code=report.exit_status,
        )
