"""URL shortening service: short codes, redirects and click statistics."""

__version__ = "1.0.0"
