"""Module entry point for `python -m contenttype_reconciler`."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
