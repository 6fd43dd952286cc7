"""nmprune - find and remove node_modules (or any named) directories in bulk."""

__version__ = "0.1.0"
