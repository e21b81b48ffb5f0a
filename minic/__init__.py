"""Linear IR, label management, control-flow graphs and dead-code marking for a small C-like language."""

__version__ = "1.0.1"