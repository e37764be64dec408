"""Trip brief schema — the structured record every provider is asked to return."""

import logging

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

ATTRACTIONS_PER_BRIEF = 10


class Attraction(BaseModel):
    name: str = Field(min_length=1)
    description: str
    image_prompt: str = Field(alias="imagePrompt")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("attraction name must not be blank")
        return value


class TripBrief(BaseModel):
    destination: str
    destination_info: str = Field(alias="destinationInfo")
    destination_image_prompt: str = Field(alias="destinationImagePrompt")
    attractions: tuple[Attraction, ...] = Field(alias="popularSpots")
    kid_friendly: str = Field(alias="kidFriendly")
    best_season: str = Field(alias="bestTimeToVisit")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("kid_friendly", mode="before")
    @classmethod
    def _yes_no(cls, value):
        # Some models answer with a JSON boolean instead of "yes"/"no"
        if isinstance(value, bool):
            return "yes" if value else "no"
        return value

    @field_validator("attractions")
    @classmethod
    def _cap_attractions(cls, value: tuple[Attraction, ...]) -> tuple[Attraction, ...]:
        if len(value) < ATTRACTIONS_PER_BRIEF:
            logger.warning(
                f"Model returned {len(value)} attractions, expected {ATTRACTIONS_PER_BRIEF}"
            )
        return value[:ATTRACTIONS_PER_BRIEF]
