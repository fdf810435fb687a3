"""
Order services for the order desk.

This module provides the submission and retrieval services that choose
between the remote order store and the local cache.
"""

from .retrieval import OrderRetrievalService
from .submission import OrderSubmissionService

__all__ = ["OrderRetrievalService", "OrderSubmissionService"]
