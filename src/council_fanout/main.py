"""CLI entrypoint for council-fanout."""

from pathlib import Path

import rich_click as click

from council_fanout import __version__
from council_fanout.controllers import FanoutCliController, FanoutCommand
from council_fanout.logger import setup_logging

click.rich_click.USE_MARKDOWN = True
FANOUT_CONTROLLER = FanoutCliController()


@click.command()
@click.version_option(version=__version__, prog_name="council-fanout")
@click.argument("context_file", type=click.Path(path_type=Path))
@click.option("--no-codex", is_flag=True, default=False, help="Do not launch Codex.")
@click.option("--no-gemini", is_flag=True, default=False, help="Do not launch Gemini.")
@click.option("--no-claude", is_flag=True, default=False, help="Do not launch Claude.")
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help=(
        "Directory for per-agent output files. "
        "Defaults to COUNCIL_FANOUT_OUTPUT_DIR, then the context file's directory."
    ),
)
@click.option(
    "--invocation-id",
    default=None,
    help="Prefix for output files. Defaults to the context file name without `-context.md`.",
)
@click.option(
    "--timeout-seconds",
    type=click.IntRange(min=0),
    default=None,
    help="Per-agent timeout; 0 waits forever. Defaults to COUNCIL_FANOUT_TIMEOUT_SECONDS.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Log level for diagnostics written to stderr.",
)
@click.pass_context
def council_fanout(  # noqa: PLR0913
    ctx: click.Context,
    context_file: Path,
    no_codex: bool,
    no_gemini: bool,
    no_claude: bool,
    output_dir: Path | None,
    invocation_id: str | None,
    timeout_seconds: int | None,
    log_level: str,
) -> None:
    """Launch Codex, Gemini, and Claude in parallel on a shared context file.

    Waits for all of them, prints a per-agent summary, and exits with the
    number of agents that failed or produced empty output.
    """

    setup_logging(log_level)
    disabled = tuple(
        agent
        for agent, flag in (("codex", no_codex), ("gemini", no_gemini), ("claude", no_claude))
        if flag
    )
    result = FANOUT_CONTROLLER.run(
        FanoutCommand(
            context_file=context_file,
            disabled_agents=disabled,
            output_dir=output_dir,
            invocation_id=invocation_id,
            timeout_seconds=timeout_seconds,
        ),
        on_event=click.echo,
    )
    _emit_lines(result.lines, err=result.configuration_error)
    ctx.exit(result.exit_code)


def _emit_lines(lines: list[str], *, err: bool = False) -> None:
    for line in lines:
        click.echo(line, err=err)


if __name__ == "__main__":  # pragma: no cover
    council_fanout()
