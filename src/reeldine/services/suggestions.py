"""AI-assisted content suggestions with deterministic fallbacks."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from reeldine.errors import ValidationError

_logger = logging.getLogger(__name__)

FEATURES = ("recipe_suggestions", "hashtag_generation")

_STRING_LIST = {"type": "array", "items": {"type": "string"}}

RECIPE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "recipes": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "description": {"type": "string"},
                    "ingredients": _STRING_LIST,
                    "steps": _STRING_LIST,
                    "cookingTime": {"type": "string"},
                    "difficulty": {
                        "type": "string",
                        "enum": ["Easy", "Medium", "Hard"],
                    },
                    "visualAppeal": {"type": "integer", "minimum": 1, "maximum": 10},
                    "sellingPoints": _STRING_LIST,
                },
                "required": [
                    "name",
                    "description",
                    "ingredients",
                    "steps",
                    "cookingTime",
                    "difficulty",
                    "visualAppeal",
                    "sellingPoints",
                ],
                "additionalProperties": False,
            },
        }
    },
    "required": ["recipes"],
    "additionalProperties": False,
}

HASHTAG_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "highEngagement": _STRING_LIST,
        "mediumEngagement": _STRING_LIST,
        "locationBased": _STRING_LIST,
        "trending": _STRING_LIST,
        "branded": _STRING_LIST,
        "strategy": {"type": "string"},
        "performance": {"type": "string"},
        "alternatives": _STRING_LIST,
    },
    "required": [
        "highEngagement",
        "mediumEngagement",
        "locationBased",
        "trending",
        "branded",
        "strategy",
        "performance",
        "alternatives",
    ],
    "additionalProperties": False,
}


class SuggestionClient(Protocol):
    """Interface for an LLM returning schema-constrained JSON."""

    async def generate(
        self,
        *,
        model: str,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
    ) -> dict[str, object]:
        """Return the structured completion for the prompt."""


@dataclass
class ContentSuggestionService:
    """Recipe ideas and hashtags for partners creating videos.

    Without a client, on provider errors and on timeouts the service answers
    from fixed fallbacks and reports ``ai_powered`` as False.
    """

    client: SuggestionClient | None
    model: str
    timeout_seconds: float = 30.0

    @property
    def available(self) -> bool:
        return self.client is not None

    def status(self) -> dict[str, object]:
        return {"available": self.available, "features": list(FEATURES)}

    async def recipe_suggestions(
        self,
        ingredients: Sequence[str],
        cuisine: str | None = None,
        dietary_restrictions: Sequence[str] = (),
    ) -> tuple[list[dict[str, object]], bool]:
        """Suggest recipes; returns the suggestions and whether AI produced them."""
        cleaned = [item.strip() for item in ingredients if item and item.strip()]
        if not cleaned:
            raise ValidationError("Ingredients array is required")
        prompt = (
            f"Based on these ingredients: {', '.join(cleaned)}, "
            "suggest 3 creative recipe ideas for food videos."
        )
        if cuisine:
            prompt += f" Focus on {cuisine} cuisine."
        if dietary_restrictions:
            prompt += (
                " Consider these dietary restrictions: "
                f"{', '.join(dietary_restrictions)}."
            )
        prompt += (
            " For each recipe give a name, a 2-3 sentence description, the key "
            "ingredients used, 3-5 preparation steps, cooking time, difficulty, "
            "a visual appeal rating from 1 to 10 and social media selling points."
        )
        result = await self._generate(prompt, RECIPE_SCHEMA, "recipe_suggestions")
        recipes = result.get("recipes") if result else None
        if not isinstance(recipes, list):
            return fallback_recipes(cleaned), False
        return recipes, True

    async def hashtags(
        self,
        content: str,
        content_type: str = "food",
        platform: str = "instagram",
    ) -> tuple[dict[str, object], bool]:
        """Suggest hashtags; returns the groups and whether AI produced them."""
        if not content or not content.strip():
            raise ValidationError("Content is required for hashtag generation")
        prompt = (
            f"Generate optimized hashtags for this {content_type} content: "
            f'"{content}". '
            f"For the {platform} platform provide 10 high-engagement, 10 "
            "medium-engagement, 5 location-based, 5 trending and 5 branded "
            "hashtags without the leading #, an overall strategy, a performance "
            "prediction and alternative combinations."
        )
        result = await self._generate(prompt, HASHTAG_SCHEMA, "hashtags")
        if not result:
            return fallback_hashtags(), False
        return result, True

    async def _generate(
        self, prompt: str, schema: dict[str, object], schema_name: str
    ) -> dict[str, object] | None:
        if self.client is None:
            return None
        try:
            return await asyncio.wait_for(
                self.client.generate(
                    model=self.model,
                    prompt=prompt,
                    schema=schema,
                    schema_name=schema_name,
                ),
                timeout=self.timeout_seconds,
            )
        except TimeoutError:
            _logger.warning(
                "AI %s timed out after %ss", schema_name, self.timeout_seconds
            )
        except Exception:
            _logger.exception("AI %s failed", schema_name)
        return None


def fallback_recipes(ingredients: list[str]) -> list[dict[str, object]]:
    return [
        {
            "name": "Simple Stir Fry",
            "description": (
                "A quick and easy stir fry using available ingredients. "
                "Perfect for busy weeknights and great for video content."
            ),
            "ingredients": ingredients[:3],
            "steps": [
                "Chop ingredients",
                "Heat oil in pan",
                "Stir fry for 5-7 minutes",
            ],
            "cookingTime": "15 minutes",
            "difficulty": "Easy",
            "visualAppeal": 7,
            "sellingPoints": ["Quick prep", "Colorful presentation", "Versatile"],
        },
        {
            "name": "Ingredient Medley Bowl",
            "description": (
                "Combine ingredients creatively for a unique and nutritious dish. "
                "Great for showcasing ingredient transformations."
            ),
            "ingredients": list(ingredients),
            "steps": [
                "Prepare ingredients separately",
                "Arrange in bowl",
                "Add dressing",
            ],
            "cookingTime": "20 minutes",
            "difficulty": "Medium",
            "visualAppeal": 8,
            "sellingPoints": ["Healthy and fresh", "Photogenic", "Customizable"],
        },
        {
            "name": "Fusion Creation",
            "description": (
                "Blend different cooking techniques for an innovative dish. "
                "Perfect for creative cooking demonstrations."
            ),
            "ingredients": list(ingredients),
            "steps": [
                "Experiment with combinations",
                "Test cooking methods",
                "Plate creatively",
            ],
            "cookingTime": "25 minutes",
            "difficulty": "Hard",
            "visualAppeal": 9,
            "sellingPoints": ["Unique flavor profile", "Technique showcase"],
        },
    ]


def fallback_hashtags() -> dict[str, object]:
    return {
        "highEngagement": [
            "foodie",
            "cooking",
            "recipe",
            "foodstagram",
            "yummy",
            "delicious",
            "homemade",
            "foodlover",
            "instafood",
            "foodphotography",
        ],
        "mediumEngagement": [
            "foodblogger",
            "cookingathome",
            "foodvideo",
            "kitchen",
            "chef",
            "tasty",
            "foodpics",
            "cookbook",
            "foodart",
            "eats",
        ],
        "locationBased": [
            "foodiegram",
            "foodspotting",
            "localfood",
            "foodtruck",
            "streetfood",
        ],
        "trending": ["viral", "trending", "fyp", "explore", "discover"],
        "branded": ["reel", "tiktokfood", "instacook", "foodtok", "cookwithme"],
        "strategy": (
            "Use 5-10 hashtags total, mix popular and niche, place at end of caption"
        ),
        "performance": "Expected reach: 10k-50k views",
        "alternatives": ["Mix with emojis", "Use question hashtags", "Branded series"],
    }
