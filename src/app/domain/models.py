# src/app/domain/models.py
"""
Domain models for accounts and recipes.
Records travel through the CSV store as flat ``dict[str, str]`` rows; these
dataclasses are the typed view the services hand out.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

Record = dict[str, str]


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-01-15T10:00:00.000Z."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


ACCOUNT_FIELDS = ("username", "email", "password", "createdAt")

RECIPE_FIELDS = (
    "id",
    "name",
    "username",
    "ingredients",
    "steps",
    "duration",
    "servings",
    "dietaryPreferences",
    "calories",
    "fat",
    "likeCount",
    "dislikeCount",
    "carbohydrates",
    "protein",
    "finalIngredientList",
    "uploadDate",
    "imageUrl",
)


@dataclass
class Account:
    """A registered user. ``password`` always holds the bcrypt hash."""
    username: str
    email: str
    password: str
    created_at: str

    def to_record(self) -> Record:
        return {
            "username": self.username,
            "email": self.email,
            "password": self.password,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_record(cls, record: Record) -> "Account":
        return cls(
            username=record.get("username", ""),
            email=record.get("email", ""),
            password=record.get("password", ""),
            created_at=record.get("createdAt", ""),
        )

    def public(self) -> dict[str, str]:
        return {"username": self.username, "email": self.email}


def _parse_int(value: str, default: int = 0) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def _parse_float(value: str, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _parse_json(value: str) -> Any:
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        return value


@dataclass
class Recipe:
    id: str
    name: str
    username: str
    ingredients: Any
    steps: str
    duration: int
    servings: int
    dietary_preferences: str
    calories: float
    fat: float
    carbohydrates: float
    protein: float
    final_ingredient_list: str
    upload_date: str
    like_count: int = 0
    dislike_count: int = 0
    image_url: Optional[str] = None

    def to_record(self) -> Record:
        """Flatten to CSV-ready strings, in ``RECIPE_FIELDS`` order."""
        values = {
            "id": self.id,
            "name": self.name,
            "username": self.username,
            "ingredients": json.dumps(self.ingredients, ensure_ascii=False),
            "steps": self.steps,
            "duration": str(self.duration),
            "servings": str(self.servings),
            "dietaryPreferences": self.dietary_preferences,
            "calories": repr(self.calories),
            "fat": repr(self.fat),
            "likeCount": str(self.like_count),
            "dislikeCount": str(self.dislike_count),
            "carbohydrates": repr(self.carbohydrates),
            "protein": repr(self.protein),
            "finalIngredientList": self.final_ingredient_list,
            "uploadDate": self.upload_date,
            "imageUrl": self.image_url or "",
        }
        return {name: values[name] for name in RECIPE_FIELDS}

    @classmethod
    def from_record(cls, record: Record) -> "Recipe":
        """
        Build a typed recipe from a CSV row.

        Rows written by older deployments may miss columns or carry
        malformed numbers; those fall back to zero rather than failing the
        whole listing.
        """
        return cls(
            id=record.get("id", ""),
            name=record.get("name", ""),
            username=record.get("username", ""),
            ingredients=_parse_json(record.get("ingredients", "")),
            steps=record.get("steps", ""),
            duration=_parse_int(record.get("duration", "")),
            servings=_parse_int(record.get("servings", "")),
            dietary_preferences=record.get("dietaryPreferences", ""),
            calories=_parse_float(record.get("calories", "")),
            fat=_parse_float(record.get("fat", "")),
            carbohydrates=_parse_float(record.get("carbohydrates", "")),
            protein=_parse_float(record.get("protein", "")),
            final_ingredient_list=record.get("finalIngredientList", ""),
            upload_date=record.get("uploadDate", ""),
            like_count=_parse_int(record.get("likeCount", "")),
            dislike_count=_parse_int(record.get("dislikeCount", "")),
            image_url=record.get("imageUrl") or None,
        )

    def to_payload(self) -> dict[str, Any]:
        """JSON shape returned by the API (camelCase, like the stored columns)."""
        return {
            "id": self.id,
            "name": self.name,
            "username": self.username,
            "ingredients": self.ingredients,
            "steps": self.steps,
            "duration": self.duration,
            "servings": self.servings,
            "dietaryPreferences": self.dietary_preferences,
            "calories": self.calories,
            "fat": self.fat,
            "likeCount": self.like_count,
            "dislikeCount": self.dislike_count,
            "carbohydrates": self.carbohydrates,
            "protein": self.protein,
            "finalIngredientList": self.final_ingredient_list,
            "uploadDate": self.upload_date,
            "imageUrl": self.image_url,
        }
