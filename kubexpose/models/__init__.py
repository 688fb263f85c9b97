"""Data models for kubexpose."""

from .errors import (
    ExposureError,
    FatalError,
    KubexposeError,
    RetriableError,
    RetryExhaustedError,
    is_retriable,
)

__all__ = [
    "KubexposeError",
    "RetriableError",
    "FatalError",
    "RetryExhaustedError",
    "ExposureError",
    "is_retriable",
]
