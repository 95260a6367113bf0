# src/app/routers/recipes.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from starlette.concurrency import run_in_threadpool

from src.app.deps import get_recipe_service
from src.app.schemas.recipes import (
    DeleteRecipesRequest,
    DeleteRecipesResponse,
    RecipeListResponse,
    RecipeResponse,
    RecipeUploadResponse,
)
from src.app.services.recipe_service import ImageUpload, RecipeService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["recipes"])


@router.post("/upload", response_model=RecipeUploadResponse)
async def upload_recipe(
    name: Optional[str] = Form(None),
    ingredients: Optional[str] = Form(None),
    steps: Optional[str] = Form(None),
    username: Optional[str] = Form(None),
    duration: Optional[str] = Form(None),
    servings: Optional[str] = Form(None),
    dietaryPreferences: Optional[str] = Form(None),
    calories: Optional[str] = Form(None),
    fat: Optional[str] = Form(None),
    carbohydrates: Optional[str] = Form(None),
    protein: Optional[str] = Form(None),
    finalIngredientList: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    recipes: RecipeService = Depends(get_recipe_service),
) -> RecipeUploadResponse:
    fields = {
        "name": name,
        "ingredients": ingredients,
        "steps": steps,
        "username": username,
        "duration": duration,
        "servings": servings,
        "dietaryPreferences": dietaryPreferences,
        "calories": calories,
        "fat": fat,
        "carbohydrates": carbohydrates,
        "protein": protein,
        "finalIngredientList": finalIngredientList,
    }

    upload = None
    if image is not None and image.filename:
        content = await image.read()
        upload = ImageUpload(
            content=content,
            filename=image.filename,
            content_type=image.content_type or "application/octet-stream",
        )
        logger.info(
            "Received recipe image: filename=%s, content_type=%s, size=%d bytes",
            image.filename,
            upload.content_type,
            len(content),
        )

    recipe = await run_in_threadpool(recipes.create, fields, upload)
    return RecipeUploadResponse(
        message="Recipe uploaded successfully.",
        recipe=RecipeResponse(**recipe.to_payload()),
    )


@router.get("/recipes", response_model=RecipeListResponse)
async def list_recipes(
    recipes: RecipeService = Depends(get_recipe_service),
) -> RecipeListResponse:
    items = await run_in_threadpool(recipes.list_all)
    return RecipeListResponse(recipes=[RecipeResponse(**r.to_payload()) for r in items])


@router.get("/recipes/{username}", response_model=RecipeListResponse)
async def list_user_recipes(
    username: str,
    recipes: RecipeService = Depends(get_recipe_service),
) -> RecipeListResponse:
    items = await run_in_threadpool(recipes.list_by_owner, username)
    return RecipeListResponse(recipes=[RecipeResponse(**r.to_payload()) for r in items])


@router.delete("/recipes/{username}", response_model=DeleteRecipesResponse)
async def delete_user_recipes(
    username: str,
    payload: DeleteRecipesRequest,
    recipes: RecipeService = Depends(get_recipe_service),
) -> DeleteRecipesResponse:
    deleted = await run_in_threadpool(recipes.delete_by_owner, username, payload.recipeIds)
    return DeleteRecipesResponse(message="Recipes deleted successfully", deleted=deleted)
