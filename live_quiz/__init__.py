"""Live multi-participant quiz server."""

from live_quiz.constants.about import APP_VERSION as __version__

__all__ = ["__version__"]
