"""
MediBlood order desk - medicine orders and blood requests with offline fallback.

This package submits and tracks orders against a remote order store and keeps
working on a local durable cache whenever that store cannot be reached.
"""

__version__ = "1.0.0"
