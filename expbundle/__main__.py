"""CLI entry point for expbundle.

Enables invocation via `python -m expbundle`.
"""

import sys

from expbundle.cli.app import app

if __name__ == "__main__":
    exit_code = app()
    sys.exit(exit_code if exit_code is not None else 0)
