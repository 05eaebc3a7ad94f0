"""Entry point for ``python -m manpower_quoter``."""

from manpower_quoter.cli import main

if __name__ == "__main__":  # pragma: no cover - exercised via module execution
    raise SystemExit(main())
