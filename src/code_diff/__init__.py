"""Code Diff - narrow down which functions implement an observed behavior."""

__version__ = "0.1.0"
