"""Local stand-in review agent for integration tests and dry runs."""

from __future__ import annotations

import argparse
import sys
import time

_MODES = ("ok", "empty", "fail", "hang")


def main(argv: list[str] | None = None) -> int:
    """Echo a deterministic review of the prompt, or misbehave on request."""

    parser = argparse.ArgumentParser()
    parser.add_argument("--mode", choices=_MODES, default="ok")
    parser.add_argument("--delay", type=float, default=0.0)
    parser.add_argument("--exit-code", type=int, default=3)
    parser.add_argument("prompt", nargs="?", default="")
    args = parser.parse_args(argv)

    if args.delay > 0:
        time.sleep(args.delay)

    if args.mode == "hang":
        time.sleep(3_600)
        return 0
    if args.mode == "empty":
        return 0

    first_line = args.prompt.strip().splitlines()[0] if args.prompt.strip() else ""
    sys.stdout.write("Echo review\n")
    sys.stdout.write(f"prompt_chars={len(args.prompt)}\n")
    sys.stdout.write(f"first_line={first_line}\n")
    sys.stdout.flush()
    if args.mode == "fail":
        return args.exit_code
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
