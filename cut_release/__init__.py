"""Interactive release-cutting assistant for npm packages."""

__version__ = "1.0.0"
