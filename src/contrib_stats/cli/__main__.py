#!/usr/bin/env python3
"""Entry point of the ``contrib-stats`` command."""

import sys

from .stats import cli, main

__all__ = ["cli", "main"]

if __name__ == "__main__":
    sys.exit(main())
