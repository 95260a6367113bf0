# src/app/deps.py (singleton storage client, exposed as dependencies)

from __future__ import annotations

from fastapi import Depends
from passlib.context import CryptContext

from src.app.config import settings
from src.app.infra.db.record_store import RecordStore
from src.app.infra.storage.base import StorageProvider
from src.app.infra.storage.memory_provider import InMemoryStorageProvider
from src.app.infra.storage.s3_provider import S3StorageProvider
from src.app.services.account_service import AccountService, build_password_context
from src.app.services.recipe_service import RecipeService

_storage: StorageProvider | None = None
_pwd_context: CryptContext | None = None


def get_storage() -> StorageProvider:
    global _storage
    if _storage is None:
        if settings.STORAGE_BACKEND == "memory":
            _storage = InMemoryStorageProvider()
        else:
            _storage = S3StorageProvider(
                bucket_name=settings.S3_BUCKET_NAME,
                region=settings.AWS_REGION,
                access_key_id=settings.AWS_ACCESS_KEY_ID,
                secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            )
    return _storage


def get_password_context() -> CryptContext:
    global _pwd_context
    if _pwd_context is None:
        _pwd_context = build_password_context(settings.PASSWORD_HASH_ROUNDS)
    return _pwd_context


def get_record_store(storage: StorageProvider = Depends(get_storage)) -> RecordStore:
    # No caching: every request re-reads collections from storage
    return RecordStore(storage)


def get_account_service(
    store: RecordStore = Depends(get_record_store),
    pwd_context: CryptContext = Depends(get_password_context),
) -> AccountService:
    return AccountService(store, users_key=settings.USERS_KEY, pwd_context=pwd_context)


def get_recipe_service(
    store: RecordStore = Depends(get_record_store),
    storage: StorageProvider = Depends(get_storage),
) -> RecipeService:
    return RecipeService(
        store,
        storage,
        recipes_key=settings.RECIPES_KEY,
        images_prefix=settings.RECIPE_IMAGES_PREFIX,
    )
