"""Core infrastructure for kubexpose."""

from .retry import expo

__all__ = ["expo"]
