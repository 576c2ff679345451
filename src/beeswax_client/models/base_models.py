"""Shared Pydantic models for the Beeswax client.

This module contains the immutable models the client is built from:

- Login credentials
- Resource descriptors (endpoint path and identifier field per resource)
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Credentials(BaseModel):
    """Login credentials for the Beeswax API.

    Supplied once at client construction and never mutated. The
    password is excluded from ``repr`` so it does not leak into logs.

    :param email: Account email used to log in
    :type email: str
    :param password: Account password
    :type password: str
    """

    model_config = ConfigDict(frozen=True)

    email: str
    password: str = Field(repr=False)

    @field_validator("email", "password")
    @classmethod
    def not_blank(cls, v: str) -> str:
        """Reject empty or whitespace-only values."""
        if not v or not v.strip():
            raise ValueError("must be a non-empty string")
        return v


class ResourceDescriptor(BaseModel):
    """Static description of one Beeswax resource type.

    :param name: Attribute name the resource is exposed under
    :type name: str
    :param endpoint: REST path of the resource collection
    :type endpoint: str
    :param id_field: Identifier field name, also used as pagination sort key
    :type id_field: str
    :param deprecated: Whether the endpoint belongs to the deprecated v1 API
    :type deprecated: bool
    """

    model_config = ConfigDict(frozen=True)

    name: str
    endpoint: str
    id_field: str
    deprecated: bool = False

    def item_path(self, resource_id) -> str:
        """Return the path of a single record of this resource."""
        return f"{self.endpoint}/{resource_id}"
