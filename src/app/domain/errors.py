from __future__ import annotations


class RecipeStoreError(Exception):
    status_code = 500


class ValidationError(RecipeStoreError):
    status_code = 400


class ConflictError(RecipeStoreError):
    status_code = 400


class NotFoundError(RecipeStoreError):
    status_code = 404


class InvalidCredentialsError(RecipeStoreError):
    status_code = 400


class StorageError(RecipeStoreError):
    pass


class ObjectNotFoundError(StorageError):
    def __init__(self, object_key: str):
        super().__init__(f"Object not found: {object_key}")
        self.object_key = object_key


class CodecError(StorageError):
    def __init__(self, message: str, line: int | None = None):
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)
        self.line = line
