"""Run the readrmood command line interface."""

import sys

from readrmood.application.cli import main

if __name__ == "__main__":
    sys.exit(main())
