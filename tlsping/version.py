"""Version of the tlsping package."""

__version__ = "0.1.0"
