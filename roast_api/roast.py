"""Roast prompt construction and generation."""

from loguru import logger

from .exceptions import ConfigError, ModelError, ValidationError
from .models import Language, ProfileRecord
from .providers import LLMProvider

UNKNOWN = "Unknown"
NOT_PROVIDED = "Not provided"

HINDI_GUIDELINES = (
    "Restrict to <60 words",
    "Create roast for Indian users in a natural-sounding way",
    "Use English transliteration of Hindi phrases",
    "Focus on the user's activity, bio, location, or any other interesting profile details",
    "If their GitHub activity is impressive, acknowledge it humorously",
    "Avoid generic roasts that could apply to anyone",
    "Keep it light-hearted and avoid truly offensive content",
    "Be creative and don't mention the number of repositories directly",
)

ENGLISH_GUIDELINES = (
    "Restrict to <80 words",
    "use slangs not proper grammar",
    "Use pure English for the roast",
    "Focus on witty wordplay and puns in English",
    "Incorporate references to popular Western tech culture if relevant",
    "Focus on the user's GitHub activity, bio, location, or any other interesting profile details",
    "If their GitHub activity is impressive, acknowledge it humorously",
    "Avoid generic roasts that could apply to anyone",
    "Keep it light-hearted and avoid truly offensive content",
    "Be creative and don't mention the number of repositories directly",
)


def _profile_lines(profile: ProfileRecord) -> list[str]:
    return [
        f"Username: {profile.username}",
        f"Name: {profile.name or UNKNOWN}",
        f"Public Repositories: {profile.public_repos} (THIS IS THE CORRECT NUMBER OF REPOS)",
        f"Followers: {profile.followers}",
        f"Following: {profile.following}",
        f"Contributions Last Year: {profile.contributions_last_year}",
        f"Bio: {profile.bio or NOT_PROVIDED}",
        f"Location: {profile.location or NOT_PROVIDED}",
        f"Company: {profile.company or NOT_PROVIDED}",
        f"Hireable: {'Yes' if profile.hireable else 'No'}",
    ]


def build_roast_prompt(profile: ProfileRecord, language: Language) -> str:
    """Build the roast instruction for ``profile`` in ``language``.

    Counts are always written out, including zeros; missing text fields
    get an explicit placeholder.
    """
    if language is Language.HINDI:
        intro = (
            "Generate a personalized, humorous roast in Hindi using English "
            "transliteration only for a GitHub user"
        )
        guidelines = HINDI_GUIDELINES
    else:
        intro = "Generate a personalized, humorous roast in English for a GitHub user"
        guidelines = ENGLISH_GUIDELINES

    lines = [f"{intro} with the following ACCURATE profile data:"]
    lines.extend(_profile_lines(profile))
    lines.append(
        "IMPORTANT: Ensure your roast accurately reflects the data provided, "
        f"especially the number of public repositories ({profile.public_repos})."
    )
    lines.append("Guidelines for the roast:")
    lines.extend(f"- {guideline}" for guideline in guidelines)
    lines.append(
        f"Now, generate a personalized, humorous roast for {profile.name or 'this user'} "
        "based on their SPECIFIC GitHub profile data:"
    )
    return "\n".join(lines)


class RoastGenerator:
    """Turns a profile into a roast with one model call."""

    def __init__(self, llm_provider: LLMProvider) -> None:
        self.llm_provider = llm_provider

    async def generate(self, profile: ProfileRecord | None, language: Language | str | None) -> str:
        """Generate a roast and return the model's text unmodified.

        Raises:
            ValidationError: If the profile is missing or the language is unknown.
            ConfigError: If the model API key is not configured.
            ModelError: If the model call fails.
        """
        if profile is None:
            raise ValidationError("Profile data is missing")

        try:
            language = Language(language)
        except ValueError as e:
            raise ValidationError("Invalid language specified. Use 'english' or 'hindi'.") from e

        prompt = build_roast_prompt(profile, language)

        try:
            response = await self.llm_provider.complete(prompt)
        except (ConfigError, ModelError):
            raise
        except Exception as e:
            logger.error(f"Unexpected model error: {e}")
            raise ModelError(f"Failed to generate roast: {e}") from e

        if response.usage:
            logger.info(
                "Token usage",
                extra={
                    "model": response.model,
                    "language": language.value,
                    "prompt_tokens": response.usage.get("prompt_tokens"),
                    "completion_tokens": response.usage.get("completion_tokens"),
                    "total_tokens": response.usage.get("total_tokens"),
                    "cost_usd": response.usage.get("cost_usd"),
                },
            )

        return response.text
