"""gust: static listing builder that dates entries from git history."""

__version__ = "0.1.0"
