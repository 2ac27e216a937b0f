"""Python REPL with a live symbol catalog."""

__version__ = "0.1.0"
