"""
Core helpers for tersehttp.

This package contains the settings and the JSON decoding helpers shared
by the outcome model and the request builder.  Keeping them apart from
the transport adapters makes it easy to swap the HTTP library in tests.
"""

__all__ = []
