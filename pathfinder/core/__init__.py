"""Pathfinder Core - Shared utilities.

Import specific functions from submodules:
    from pathfinder.core.config import ConfigManager
    from pathfinder.core.logging import Logger
    from pathfinder.core.walk import walk
    from pathfinder.core import constants
"""

from pathfinder.core import config, constants, logging, walk

__all__ = [
    "config",
    "constants",
    "logging",
    "walk",
]
