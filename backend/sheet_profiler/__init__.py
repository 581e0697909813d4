"""Sheet Profiler — column typing and summary statistics for uploaded spreadsheets."""

__version__ = "0.1.0"
