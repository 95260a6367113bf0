from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class RecipeResponse(BaseModel):
    id: str
    name: str
    username: str
    ingredients: Any = None
    steps: str
    duration: int
    servings: int
    dietaryPreferences: str
    calories: float
    fat: float
    likeCount: int = 0
    dislikeCount: int = 0
    carbohydrates: float
    protein: float
    finalIngredientList: str
    uploadDate: str
    imageUrl: Optional[str] = None


class RecipeUploadResponse(BaseModel):
    message: str
    recipe: RecipeResponse


class RecipeListResponse(BaseModel):
    recipes: list[RecipeResponse] = Field(default_factory=list)


class DeleteRecipesRequest(BaseModel):
    recipeIds: list[str] = Field(default_factory=list)


class DeleteRecipesResponse(BaseModel):
    message: str
    deleted: int = 0
