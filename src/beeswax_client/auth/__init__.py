"""Authentication for the Beeswax client.

This package holds the session state shared by all requests and the
coordinator that logs in, making sure concurrent callers share a single
login attempt.
"""

from .coordinator import LOGIN_PATH, AuthCoordinator
from .session import SessionStore

__all__ = [
    "AuthCoordinator",
    "LOGIN_PATH",
    "SessionStore",
]
