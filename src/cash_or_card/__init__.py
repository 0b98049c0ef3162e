"""Cash or Card: crowd-sourced payment facts for restaurants."""

__version__ = "0.1.0"
