"""Data models using Pydantic."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Language(str, Enum):
    """Languages a roast can be written in."""

    ENGLISH = "english"
    HINDI = "hindi"


class ProfileRecord(BaseModel):
    """Merged GitHub profile attributes and yearly contribution count."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    username: str = Field(..., min_length=1)
    name: str | None = None
    public_repos: int = Field(0, ge=0)
    followers: int = Field(0, ge=0)
    following: int = Field(0, ge=0)
    bio: str | None = None
    location: str | None = None
    company: str | None = None
    hireable: bool | None = None
    contributions_last_year: int = Field(0, ge=0)
    avatar_url: str | None = None
    html_url: str | None = None


class ProfileRequest(BaseModel):
    """Input for the profile endpoint."""

    username: str


class RoastRequest(BaseModel):
    """Input for the roast endpoint.

    Both fields are optional here so the handler can answer with its own
    400 messages instead of the generic validation error.
    """

    model_config = ConfigDict(populate_by_name=True)

    profile_data: ProfileRecord | None = Field(default=None, alias="profileData")
    language: str | None = None


class RoastResponse(BaseModel):
    """Generated roast."""

    roast: str


class CountResponse(BaseModel):
    """Current value of the usage counter."""

    count: int
