"""User model for the signed-in account."""

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """The authenticated user as cached on the device."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(default=None, description="User profile ID")
    email: str
    username: str
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    phone_number: str | None = Field(default=None, alias="phoneNumber")
    has_completed_profile: bool = Field(default=False, alias="hasCompletedProfile")

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip() or self.username
