"""toolpick - let a language model pick which tools answer a query."""

__version__ = "0.1.0"
