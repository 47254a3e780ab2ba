"""animerate - personal anime rating backend."""

__version__ = "0.1.0"
