"""
Run a NumerX CSV upload from a source checkout.
"""

from __future__ import annotations

from numerx_pusher.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
