"""Aggregate per-agent results into a report and a printable summary."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

from council_fanout.models import AgentOutcome, AgentResult, InvocationReport

_OUTCOME_MARKS = {
    AgentOutcome.SUCCESS: "✓",
    AgentOutcome.EMPTY_OUTPUT: "✗",
    AgentOutcome.PROCESS_FAILURE: "✗",
    AgentOutcome.SKIPPED: "-",
}


def build_report(
    *,
    invocation_id: str,
    context_file: Path,
    results: Iterable[AgentResult],
    agent_order: Sequence[str],
) -> InvocationReport:
    """Freeze results into a report ordered by declared agent order.

    Raises ValueError when an agent has more than one result.
    """

    by_agent: dict[str, AgentResult] = {}
    for result in results:
        if result.agent in by_agent:
            raise ValueError(f"Duplicate result for agent={result.agent!r}")
        by_agent[result.agent] = result

    rank = {agent: index for index, agent in enumerate(agent_order)}
    ordered = sorted(by_agent.values(), key=lambda item: rank.get(item.agent, len(rank)))
    return InvocationReport(
        invocation_id=invocation_id,
        context_file=context_file,
        results=tuple(ordered),
    )


def render_summary_lines(report: InvocationReport) -> list[str]:
    """Human-readable summary: one line per agent, then output files."""

    lines = [
        f"Invocation {report.invocation_id}: "
        f"{report.success_count}/{report.launched_count} succeeded, "
        f"failures={report.failure_count}",
        "---",
    ]
    for result in report.results:
        lines.append(f"  {_OUTCOME_MARKS[result.outcome]} {_describe(result)}")
    lines.append("---")

    output_paths = report.output_paths
    if output_paths:
        lines.append("Output files:")
        for result in report.results:
            if result.output_path is None or not result.output_path.exists():
                continue
            lines.append(f"  {result.output_path} ({_size_text(result)})")
    else:
        lines.append("No output files.")

    if report.failed_agents:
        lines.append(f"Failed agents: {', '.join(report.failed_agents)}")
    return lines


def describe_result(result: AgentResult) -> str:
    """Single progress line for one resolved agent."""

    return f"{_OUTCOME_MARKS[result.outcome]} {_describe(result)}"


def _describe(result: AgentResult) -> str:
    text = f"{result.agent} [{result.outcome.value}] {result.reason}"
    if result.outcome == AgentOutcome.SUCCESS and result.line_count is not None:
        text = f"{text} ({result.line_count} lines)"
    return text


def _size_text(result: AgentResult) -> str:
    lines = result.line_count if result.line_count is not None else 0
    size = result.size_bytes if result.size_bytes is not None else 0
    return f"{lines} lines, {size} bytes"
