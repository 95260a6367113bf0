# src/app/services/recipe_service.py
"""
Recipe creation, listing and deletion on top of the recipes collection.
"""
from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional
from uuid import uuid4

from src.app.domain.errors import ConflictError, NotFoundError, ValidationError
from src.app.domain.models import Record, Recipe, utc_timestamp
from src.app.infra.db.record_store import RecordStore
from src.app.infra.storage.base import StorageProvider

logger = logging.getLogger(__name__)

DEFAULT_RECIPES_KEY = "recipes/recipe.csv"
DEFAULT_IMAGES_PREFIX = "recipes/images"

REQUIRED_FIELDS = (
    "name",
    "ingredients",
    "steps",
    "duration",
    "servings",
    "dietaryPreferences",
    "calories",
    "fat",
    "carbohydrates",
    "protein",
    "finalIngredientList",
)

NUMERIC_FIELDS = ("duration", "servings", "calories", "fat", "carbohydrates", "protein")

_NUMBER_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?", re.ASCII)


@dataclass
class ImageUpload:
    """An uploaded image as handed over by the HTTP layer."""
    content: bytes
    filename: str
    content_type: str = "application/octet-stream"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def _number(value: Any) -> Optional[float]:
    text = str(value).strip()
    # Plain decimal notation only; no digit separators or non-ASCII digits
    if not _NUMBER_RE.fullmatch(text):
        return None
    number = float(text)
    return number if math.isfinite(number) else None


class RecipeService:
    def __init__(
        self,
        store: RecordStore,
        storage: StorageProvider,
        recipes_key: str = DEFAULT_RECIPES_KEY,
        images_prefix: str = DEFAULT_IMAGES_PREFIX,
        id_factory: Callable[[], str] = lambda: str(uuid4()),
    ):
        self._store = store
        self._storage = storage
        self.recipes_key = recipes_key
        self.images_prefix = images_prefix
        self._new_id = id_factory

    def create(
        self,
        fields: Mapping[str, Any],
        image: Optional[ImageUpload] = None,
    ) -> Recipe:
        """
        Validate request fields, store the optional image and append the recipe.

        Raises:
            ValidationError: Missing fields, non-JSON ingredients or bad numbers
        """
        recipe = self._build_recipe(fields)

        if image is not None and image.content:
            image_key = self._storage.generate_object_key(image.filename, self.images_prefix)
            self._storage.write_object(image_key, image.content, image.content_type)
            recipe.image_url = self._storage.public_url(image_key)
            logger.info("Stored recipe image: key=%s", image_key)

        record = recipe.to_record()

        def append(recipes: list[Record]) -> list[Record]:
            if any(existing.get("id") == recipe.id for existing in recipes):
                raise ConflictError(f"Recipe id already exists: {recipe.id}")
            recipes.append(record)
            return recipes

        self._store.mutate(self.recipes_key, append)
        logger.info("Created recipe: id=%s, username=%s", recipe.id, recipe.username)
        return recipe

    def list_all(self) -> list[Recipe]:
        """All recipes, in stored order."""
        return [Recipe.from_record(record) for record in self._load_existing()]

    def list_by_owner(self, username: str) -> list[Recipe]:
        recipes = [
            Recipe.from_record(record)
            for record in self._load_existing()
            if record.get("username") == username
        ]
        if not recipes:
            raise NotFoundError(f"No recipes found for user: {username}")
        return recipes

    def delete_by_owner(self, username: str, ids: Iterable[str]) -> int:
        """
        Delete the given recipe ids, but only those owned by ``username``.

        The collection is rewritten even when nothing matched.

        Returns:
            Number of deleted recipes
        """
        wanted = {str(recipe_id) for recipe_id in ids}
        if not wanted:
            raise ValidationError("No recipes selected")
        if not self._store.collection_exists(self.recipes_key):
            raise NotFoundError("No recipes found")

        removed = 0

        def drop_owned(recipes: list[Record]) -> list[Record]:
            nonlocal removed
            kept = [
                recipe
                for recipe in recipes
                if recipe.get("username") != username or recipe.get("id") not in wanted
            ]
            removed = len(recipes) - len(kept)
            return kept

        self._store.mutate(self.recipes_key, drop_owned)
        logger.info("Deleted %d recipes for username=%s", removed, username)
        return removed

    def _load_existing(self) -> list[Record]:
        if not self._store.collection_exists(self.recipes_key):
            raise NotFoundError("No recipes found")
        return self._store.load_collection(self.recipes_key)

    def _build_recipe(self, fields: Mapping[str, Any]) -> Recipe:
        if any(not fields.get(name) for name in REQUIRED_FIELDS):
            raise ValidationError("Missing required fields.")

        try:
            ingredients = json.loads(fields["ingredients"], parse_constant=_reject_constant)
        except (TypeError, ValueError):
            raise ValidationError("Ingredients must be valid JSON.") from None

        numbers = {name: _number(fields[name]) for name in NUMERIC_FIELDS}
        if any(value is None for value in numbers.values()):
            raise ValidationError("Nutritional values and duration must be numbers.")

        duration = int(numbers["duration"])
        servings = int(numbers["servings"])
        if duration <= 0 or servings <= 0:
            raise ValidationError("Duration and servings must be positive.")
        nutrition = {name: numbers[name] for name in ("calories", "fat", "carbohydrates", "protein")}
        if any(value < 0 for value in nutrition.values()):
            raise ValidationError("Nutritional values must not be negative.")

        return Recipe(
            id=self._new_id(),
            name=str(fields["name"]),
            username=str(fields.get("username") or ""),
            ingredients=ingredients,
            steps=str(fields["steps"]),
            duration=duration,
            servings=servings,
            dietary_preferences=str(fields["dietaryPreferences"]),
            calories=nutrition["calories"],
            fat=nutrition["fat"],
            carbohydrates=nutrition["carbohydrates"],
            protein=nutrition["protein"],
            final_ingredient_list=str(fields["finalIngredientList"]),
            upload_date=utc_timestamp(),
        )
