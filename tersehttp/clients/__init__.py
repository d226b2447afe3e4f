"""
Transport adapters for tersehttp.

Each adapter wraps one HTTP library behind the ``Transport`` protocol.
"""

__all__ = []
