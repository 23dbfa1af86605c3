"""Donkey: filesystem trash, restore and sharing for a path-addressed data store."""

__version__ = "0.1.0"

from donkey._donkey import Donkey
from donkey.config import DonkeyConfig, load_config
from donkey.fs.exceptions import DonkeyError
from donkey.fs.types import Permissions

__all__ = [
    "Donkey",
    "DonkeyConfig",
    "DonkeyError",
    "Permissions",
    "__version__",
    "load_config",
]
