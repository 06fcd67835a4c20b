"""Models for the login exchange and the claims carried by access tokens."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    """Login credentials for a ZeroOne account.

    Frozen: a client keeps the same credentials for its whole lifetime.
    Serialized with ``by_alias=True`` this is the body of ``auth/login``.
    """

    email: str
    password: str = Field(repr=False)
    company_id: str = Field(alias="empresaId")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class LoginResponse(BaseModel):
    """Body returned by ``auth/login``. Every field may be missing."""

    message: str | None = None
    token: str | None = None
    user_name: str | None = Field(default=None, alias="userName")

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class TokenClaims(BaseModel):
    """Payload section of a JWT access token.

    Only ``exp`` is interpreted; other claims are kept as extra fields.
    """

    exp: float | None = None

    model_config = ConfigDict(extra="allow")

    @property
    def expires_at(self) -> datetime | None:
        if self.exp is None:
            return None
        return datetime.fromtimestamp(self.exp, tz=UTC)
