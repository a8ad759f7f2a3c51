"""
Wallit Users — Pydantic Request/Response Schemas
=================================================

What:  The API contract for the /users endpoints.
How:   Request fields are all optional strings. Presence is checked by the
       field validator in the service layer so that a missing field produces
       a 400 naming it, not FastAPI's generic 422.

No response model has a password field, so a hash can never be serialized.
"""

from typing import Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class UserCreate(BaseModel):
    """Body of POST /users."""
    firstname: Optional[str] = Field(default=None, description="First name")
    lastname: Optional[str] = Field(default=None, description="Last name")
    email: Optional[str] = Field(default=None, description="Email address (must be unique)")
    password: Optional[str] = Field(default=None, description="Plaintext password, hashed before storage")


class UserCredentials(BaseModel):
    """Body of POST /users/authenticate."""
    email: Optional[str] = Field(default=None, description="Registered email address")
    password: Optional[str] = Field(default=None, description="Plaintext password")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserResponse(BaseModel):
    """
    Public representation of a user.

    Returned by POST /users/authenticate and GET /users?email=...
    """
    id: int = Field(description="User identifier")
    firstname: str = Field(description="First name")
    lastname: str = Field(description="Last name")
    email: str = Field(description="Email address")

    model_config = {"from_attributes": True}


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
