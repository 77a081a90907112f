"""Reading habit tracker with mood logging and achievements."""

__version__ = "0.1.0"
