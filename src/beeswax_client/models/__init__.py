"""Beeswax client models package.

This package contains the Pydantic models used throughout the client:
credentials, resource descriptors and the result envelope.
"""

from .base_models import Credentials, ResourceDescriptor
from .result import FailureKind, Result

__all__ = [
    "Credentials",
    "ResourceDescriptor",
    "FailureKind",
    "Result",
]
