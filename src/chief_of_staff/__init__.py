"""Chief of staff: routes free-text requests to capability agents."""

__version__ = "0.1.0"
