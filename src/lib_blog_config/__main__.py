"""``python -m lib_blog_config`` entry point; delegates to :func:`lib_blog_config.cli.main`."""

from __future__ import annotations

import sys

from .cli import main


if __name__ == "__main__":  # pragma: no cover - exercised via python -m
    raise SystemExit(main(sys.argv[1:]))
