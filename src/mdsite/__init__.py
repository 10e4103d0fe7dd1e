"""mdsite - build and validate static sites from Markdown documentation trees."""

__version__ = "0.1.0"
