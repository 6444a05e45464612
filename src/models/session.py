"""Session models shared by the auth gate and the identity provider."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class AuthUser(BaseModel):
    """Signed-in back-office user."""
    id: str = Field(..., description="Identity provider user ID")
    email: str = Field(..., description="Email address")
    name: Optional[str] = Field(None, description="Display name from user metadata")


class AuthSession(BaseModel):
    """A user identity paired with its bearer access token."""
    model_config = ConfigDict(populate_by_name=True)

    user: AuthUser
    access_token: str = Field(..., alias="accessToken", min_length=1)

    def to_record(self) -> dict:
        """Serialize to the persisted ``{user, accessToken}`` record."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)
