"""Campaign strategy - the structured prompt behind a campaign session."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PhotoConcept:
    scene_description: str
    lighting: str
    mood: str
    props: str

    def to_prompt(self) -> str:
        """Flatten into the photo instruction sent to the generator."""
        return (
            f"Scene: {self.scene_description}. Lighting: {self.lighting}. "
            f"Mood: {self.mood}. Props: {self.props}."
        )


@dataclass(frozen=True)
class SocialCaption:
    platform: str
    caption: str


@dataclass(frozen=True)
class CampaignStrategy:
    """Three photo concepts and three platform captions."""
    photo_concepts: list[PhotoConcept] = field(default_factory=list)
    social_captions: list[SocialCaption] = field(default_factory=list)
