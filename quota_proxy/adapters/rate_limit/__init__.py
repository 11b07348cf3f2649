"""Usage storage adapters.

This package provides a small abstraction layer so the proxy can start with
an in-memory store and later migrate to Redis or another shared store without
changing the quota logic or the API layer.
"""
