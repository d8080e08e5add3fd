"""Personal task tracker: task/category state, persistence and views."""

__version__ = "0.1.0"
