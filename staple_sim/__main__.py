"""Entry point for `python -m staple_sim`."""

import sys

from staple_sim.cli import main

if __name__ == "__main__":
    sys.exit(main())
