"""
Prompt building for bedtime story generation.

Turns the user-supplied story fields into the system instruction sent to
Gemini. Pure and deterministic: identical inputs always produce the same text.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..api.models import StoryRequest

# Defaults used when an optional field is missing or empty
STORY_DEFAULTS = {
    "animal_name": "Whisper",
    "moral": "kindness",
    "setting": "enchanted forest",
    "repeating_phrase": "and the stars twinkled overhead",
}

SYSTEM_INSTRUCTION_TEMPLATE = """\
You are a children's storyteller specializing in magical bedtime stories that gently guide children toward sleep. Create a soothing, imaginative tale featuring a {animal} protagonist named {animal_name}.

Story Guidelines:
- Tone: Gentle, whimsical, and heartwarming with a calming progression
- Structure: Begin with an awakening/curious moment, include a small challenge, then resolve with comfort and peace
- Moral: Weave in a subtle lesson about {moral}
- Length: 350-400 words (approximately 60 seconds when read aloud)
- Language: Use simple vocabulary with occasional lyrical phrases
- Setting: Create a vivid {setting} with rich sensory details
- Pattern: Include a gentle repeating phrase like '{repeating_phrase}' that appears 3 times
- Ending: Gradually wind down with sleepy imagery and a sense of peaceful resolution

Format your response as continuous narrative text suitable for reading aloud. Do not include scene headings, sound effects, narrator instructions, or structural notes."""


def build_system_instruction(
    animal: str,
    animal_name: Optional[str] = None,
    moral: Optional[str] = None,
    setting: Optional[str] = None,
    repeating_phrase: Optional[str] = None,
) -> str:
    """
    Build the storyteller system instruction.

    Each optional field falls back to its entry in STORY_DEFAULTS when it is
    None or an empty string.

    Args:
        animal: The protagonist's species (e.g. "fox")
        animal_name: The protagonist's name
        moral: The lesson woven into the story
        setting: Where the story takes place
        repeating_phrase: Phrase repeated three times through the story

    Returns:
        The full instruction text, without leading or trailing whitespace
    """
    return SYSTEM_INSTRUCTION_TEMPLATE.format(
        animal=animal,
        animal_name=animal_name or STORY_DEFAULTS["animal_name"],
        moral=moral or STORY_DEFAULTS["moral"],
        setting=setting or STORY_DEFAULTS["setting"],
        repeating_phrase=repeating_phrase or STORY_DEFAULTS["repeating_phrase"],
    ).strip()


def build_from_request(request: "StoryRequest") -> str:
    """Build the system instruction from a StoryRequest model."""
    return build_system_instruction(
        animal=request.animal,
        animal_name=request.animal_name,
        moral=request.moral,
        setting=request.setting,
        repeating_phrase=request.repeating_phrase,
    )
