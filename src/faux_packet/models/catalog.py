"""
Facility and plan models.

Both are immutable catalog entries: created once, looked up by their
short code (facilities) or slug (plans).
"""

from pydantic import BaseModel, ConfigDict, Field


class FacilityCreate(BaseModel):
    """Request model for creating a facility."""

    name: str = Field(..., min_length=1, description="Facility display name")
    code: str = Field(
        ...,
        min_length=1,
        max_length=16,
        pattern=r"^[a-z0-9]+$",
        description="Short locator slug, e.g. ewr1",
    )


class Facility(BaseModel):
    """A physical location devices and volumes live in."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique facility ID")
    name: str = Field(description="Facility display name")
    code: str = Field(description="Short locator slug, unique among facilities")
    href: str = Field(default="", description="API path")


class FacilityList(BaseModel):
    """Response model for listing facilities."""

    facilities: list[Facility] = Field(default_factory=list)


class PlanCreate(BaseModel):
    """Request model for creating a plan."""

    name: str = Field(..., min_length=1, description="Plan display name")
    slug: str = Field(
        ...,
        min_length=1,
        max_length=63,
        pattern=r"^[a-z0-9][a-z0-9._-]*$",
        description="Plan slug, e.g. baremetal_0",
    )


class Plan(BaseModel):
    """A device or storage size tier."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique plan ID")
    name: str = Field(description="Plan display name")
    slug: str = Field(description="Plan slug, unique among plans")
    href: str = Field(default="", description="API path")


class PlanList(BaseModel):
    """Response model for listing plans."""

    plans: list[Plan] = Field(default_factory=list)
