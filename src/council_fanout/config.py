"""Runtime configuration for the fan-out orchestrator."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_REVIEW_PROMPT = (
    "Review the following. Identify bugs, improvements, security concerns, "
    "and potential issues. Verify all computations."
)

DEFAULT_COMMAND_TEMPLATES = {
    "codex": "codex exec --full-auto --skip-git-repo-check {prompt}",
    "gemini": "gemini {prompt}",
    "claude": "claude -p --model sonnet {prompt}",
}


@dataclass(slots=True)
class FanoutSettings:
    """Settings for one orchestrator process."""

    output_dir: Path | None = None
    timeout_seconds: int = 1_800
    poll_interval_seconds: float = 0.1
    empty_threshold_bytes: int = 10
    inline_max_bytes: int = 200_000
    review_prompt: str = DEFAULT_REVIEW_PROMPT
    command_templates: dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_COMMAND_TEMPLATES),
    )

    @classmethod
    def from_env(cls, output_dir: Path | None = None) -> FanoutSettings:
        """Load settings from environment with defaults matching the stock agent CLIs."""

        env_output_dir = os.getenv("COUNCIL_FANOUT_OUTPUT_DIR", "").strip()
        return cls(
            output_dir=output_dir or (Path(env_output_dir) if env_output_dir else None),
            timeout_seconds=_env_int("COUNCIL_FANOUT_TIMEOUT_SECONDS", 1_800),
            poll_interval_seconds=_env_float("COUNCIL_FANOUT_POLL_INTERVAL_SECONDS", 0.1),
            empty_threshold_bytes=_env_int("COUNCIL_FANOUT_EMPTY_THRESHOLD_BYTES", 10),
            inline_max_bytes=_env_int("COUNCIL_FANOUT_INLINE_MAX_BYTES", 200_000),
            review_prompt=os.getenv("COUNCIL_FANOUT_REVIEW_PROMPT", "").strip()
            or DEFAULT_REVIEW_PROMPT,
            command_templates={
                agent: os.getenv(f"COUNCIL_FANOUT_{agent.upper()}_COMMAND", "").strip()
                or template
                for agent, template in DEFAULT_COMMAND_TEMPLATES.items()
            },
        )

    @property
    def effective_timeout(self) -> float | None:
        """Per-task timeout in seconds, or None for an unbounded wait."""

        return float(self.timeout_seconds) if self.timeout_seconds > 0 else None

    def validate(self) -> None:
        """Raise ValueError when a setting is out of range."""

        if self.timeout_seconds < 0:
            raise ValueError("COUNCIL_FANOUT_TIMEOUT_SECONDS must be >= 0.")
        if self.poll_interval_seconds <= 0:
            raise ValueError("COUNCIL_FANOUT_POLL_INTERVAL_SECONDS must be > 0.")
        if self.empty_threshold_bytes < 0:
            raise ValueError("COUNCIL_FANOUT_EMPTY_THRESHOLD_BYTES must be >= 0.")
        if self.inline_max_bytes < 0:
            raise ValueError("COUNCIL_FANOUT_INLINE_MAX_BYTES must be >= 0.")
        for agent, template in self.command_templates.items():
            if "{prompt}" not in template:
                raise ValueError(
                    f"Command template for agent={agent!r} must include {{prompt}}.",
                )


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError as error:
        raise ValueError(f"Invalid integer value for {name}: {raw!r}") from error


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError as error:
        raise ValueError(f"Invalid float value for {name}: {raw!r}") from error
