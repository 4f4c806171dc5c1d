"""Craftsman profile models for MongoDB."""

from datetime import datetime, timezone

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ContactInformation(BaseModel):
    """Craftsman contact details."""

    phone: str = ""
    website: str = ""
    social_media: dict[str, str] = Field(default_factory=dict)


class CraftsmanProfile(BaseModel):
    """Craftsman profile document, one per craftsman user."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(None, validation_alias=AliasChoices("_id", "id"))
    user_id: str
    bio: str = ""
    experience: int = Field(default=0, ge=0)
    rating: float = Field(default=0.0, ge=0, le=5)
    location: str
    contact_info: ContactInformation = Field(default_factory=ContactInformation)
    is_verified: bool = False

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
