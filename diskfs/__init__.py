"""diskfs - root-prefixed disk filesystem with portable file handles."""

__version__ = "0.1.0"
