"""WolfCafe menu items editor."""

__version__ = "1.0.0"
