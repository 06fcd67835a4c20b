"""Pydantic models for ZeroOne requests, responses and example records."""

from .auth import Credentials, LoginResponse, TokenClaims
from .base import BulkCreateEnvelope, CreateEnvelope, ItemType, ViewResponse
from .entities import Activity, Client, ListsResponse, Project

__all__ = [
    "Activity",
    "BulkCreateEnvelope",
    "Client",
    "CreateEnvelope",
    "Credentials",
    "ItemType",
    "ListsResponse",
    "LoginResponse",
    "Project",
    "TokenClaims",
    "ViewResponse",
]
