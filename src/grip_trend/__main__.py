"""Entry point for ``python -m grip_trend``."""

from __future__ import annotations

from grip_trend.cli import main as run_cli


def main() -> int:
    """Run CLI entrypoint."""
    try:
        return run_cli()
    except (FileNotFoundError, ValueError) as exc:
        print(f"ERROR: {exc}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
