"""Pydantic models for API requests."""

from typing import Optional

from pydantic import BaseModel, Field


class StoryRequest(BaseModel):
    """Request body for POST /transcript.

    `animal` is optional at the schema level so that a missing value is
    reported as a 400 with a fixed message rather than a 422.
    """

    animal: Optional[str] = Field(
        default=None,
        description="Species of the story's protagonist",
        examples=["fox", "owl"],
    )
    animal_name: Optional[str] = Field(default=None, description="Protagonist's name")
    moral: Optional[str] = Field(default=None, description="Lesson woven into the story")
    setting: Optional[str] = Field(default=None, description="Where the story takes place")
    repeating_phrase: Optional[str] = Field(
        default=None, description="Phrase repeated three times through the story"
    )
