"""Pack calculation service: optimal pack distributions over a WSGI HTTP API."""

__version__ = "1.0.0"