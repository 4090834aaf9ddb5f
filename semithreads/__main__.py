"""CLI entry point: python -m semithreads"""

import sys

from semithreads.cli import main

sys.exit(main())
