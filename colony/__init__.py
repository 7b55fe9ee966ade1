"""Colony — tick-based worker decision engine and room simulation."""

__version__ = "0.1.0"
