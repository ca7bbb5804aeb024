"""Community-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CommunityCreate(BaseModel):
    """Schema for creating a new community."""

    name: str = Field(..., description="3 to 30 letters, digits, '-' or '_'")
    description: str | None = None


class CommunityUpdate(BaseModel):
    """Owner edits; the name cannot change. Omitted fields are left alone."""

    description: str | None = None
    logo_uri: str | None = Field(None, max_length=255)
    banner_uri: str | None = Field(None, max_length=255)


class CommunityResponse(BaseModel):
    """Schema for community information returned by the API."""

    id: str
    name: str
    description: str | None
    logo_uri: str | None = None
    banner_uri: str | None = None
    owner_user_id: str | None
    member_count: int
    created_at: datetime
    updated_at: datetime
    last_active_at: datetime | None
    disabled_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
