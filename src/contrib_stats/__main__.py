"""Allow ``python -m contrib_stats``."""

import sys

from .cli.__main__ import main

if __name__ == "__main__":
    sys.exit(main())
