"""Find duplicate files and replace them with hardlinks."""

__version__ = "0.1.0"
