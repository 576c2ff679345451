"""Beeswax API client package.

This package provides a session-authenticated async client for the
Beeswax advertising platform REST API. It handles login and transparent
re-authentication, paginated bulk reads, and normalizes the server's
error shapes into a uniform :class:`~beeswax_client.models.Result`.

:var __version__: Current package version
:type __version__: str
"""

from .client import BeeswaxClient
from .models import FailureKind, Result

__version__ = "0.1.0"

__all__ = ["BeeswaxClient", "FailureKind", "Result", "__version__"]
