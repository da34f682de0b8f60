"""Content backend for a personal-brand site: blog, services and products."""

__version__ = "1.0.0"
