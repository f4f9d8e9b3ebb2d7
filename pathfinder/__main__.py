"""Allow ``python -m pathfinder``."""

import sys

from pathfinder.cli import main

sys.exit(main())
