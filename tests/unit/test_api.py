from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from src.app.deps import get_password_context, get_recipe_service, get_storage
from src.app.domain.errors import StorageError
from src.app.infra.storage.memory_provider import InMemoryStorageProvider
from src.app.main import app
from src.app.services.account_service import build_password_context

RECIPE_FORM = {
    "name": "Pancakes",
    "ingredients": '["flour", "milk"]',
    "steps": "Mix, then fry",
    "username": "alice",
    "duration": "20",
    "servings": "4",
    "dietaryPreferences": "vegetarian",
    "calories": "350",
    "fat": "12",
    "carbohydrates": "40",
    "protein": "8",
    "finalIngredientList": "flour, milk",
}


class ReadOnlyStorageProvider(InMemoryStorageProvider):
    def write_object(self, object_key: str, body: bytes, content_type: str) -> None:
        raise StorageError("Failed to write object: AccessDenied")


@pytest.fixture
def storage() -> InMemoryStorageProvider:
    return InMemoryStorageProvider(base_url="https://cgas-recipe-data.s3.us-east-1.amazonaws.com")


@pytest.fixture
def client(storage: InMemoryStorageProvider):
    pwd_context = build_password_context(rounds=4)
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_password_context] = lambda: pwd_context
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestRoot:
    def test_welcome(self, client: TestClient) -> None:
        res = client.get("/")
        assert res.status_code == 200
        assert res.text == "Welcome to the Recipe Upload API"

    def test_health(self, client: TestClient) -> None:
        assert client.get("/health").json() == {"ok": True}


class TestAccounts:
    def test_register_and_login_flow(self, client: TestClient) -> None:
        res = client.post("/register", json={"username": "bob", "email": "b@x.com", "password": "pw123"})
        assert res.status_code == 200
        assert res.json() == {
            "message": "User registered successfully",
            "user": {"username": "bob", "email": "b@x.com"},
        }

        res = client.post("/register", json={"username": "bob", "email": "c@x.com", "password": "pw"})
        assert res.status_code == 400
        assert res.json()["message"] == "Username already exists"

        res = client.post("/login", json={"username": "bob", "password": "wrong"})
        assert res.status_code == 400
        assert res.json()["message"] == "Incorrect password"

        res = client.post("/login", json={"username": "bob", "password": "pw123"})
        assert res.status_code == 200
        assert res.json() == {"message": "Login successful", "user": {"username": "bob", "email": "b@x.com"}}

    def test_register_duplicate_email(self, client: TestClient) -> None:
        client.post("/register", json={"username": "bob", "email": "b@x.com", "password": "pw"})
        res = client.post("/register", json={"username": "rob", "email": "b@x.com", "password": "pw"})
        assert res.status_code == 400
        assert res.json()["message"] == "Email already registered"

    def test_register_missing_fields(self, client: TestClient) -> None:
        res = client.post("/register", json={"username": "bob"})
        assert res.status_code == 400
        assert res.json()["message"] == "Username, email, and password are required"

    def test_login_without_users(self, client: TestClient) -> None:
        res = client.post("/login", json={"username": "bob", "password": "pw"})
        assert res.status_code == 404
        assert res.json()["message"] == "No users found"

    def test_login_unknown_user(self, client: TestClient) -> None:
        client.post("/register", json={"username": "bob", "email": "b@x.com", "password": "pw"})
        res = client.post("/login", json={"username": "ann", "password": "pw"})
        assert res.status_code == 400
        assert res.json()["message"] == "User not found"

    def test_password_hash_never_returned(self, client: TestClient) -> None:
        res = client.post("/register", json={"username": "bob", "email": "b@x.com", "password": "pw"})
        assert "password" not in res.json()["user"]

    def test_malformed_body(self, client: TestClient) -> None:
        res = client.post("/register", content=b"not json", headers={"Content-Type": "application/json"})
        assert res.status_code == 400
        assert res.json()["message"] == "Invalid request body"

    def test_storage_failure(self, client: TestClient) -> None:
        app.dependency_overrides[get_storage] = lambda: ReadOnlyStorageProvider()
        res = client.post("/register", json={"username": "bob", "email": "b@x.com", "password": "pw"})
        assert res.status_code == 500
        assert res.json()["message"] == "Storage error"
        assert "AccessDenied" in res.json()["error"]


class TestRecipes:
    def test_upload_without_image(self, client: TestClient) -> None:
        res = client.post("/upload", data=RECIPE_FORM)
        assert res.status_code == 200
        body = res.json()
        assert body["message"] == "Recipe uploaded successfully."
        assert body["recipe"]["ingredients"] == ["flour", "milk"]
        assert body["recipe"]["duration"] == 20
        assert body["recipe"]["calories"] == 350.0
        assert body["recipe"]["likeCount"] == 0
        assert body["recipe"]["imageUrl"] is None

    def test_upload_with_image(self, client: TestClient, storage: InMemoryStorageProvider) -> None:
        res = client.post(
            "/upload",
            data=RECIPE_FORM,
            files={"image": ("cake.png", b"\x89PNG", "image/png")},
        )
        assert res.status_code == 200
        image_url = res.json()["recipe"]["imageUrl"]
        assert image_url.startswith("https://cgas-recipe-data.s3.us-east-1.amazonaws.com/recipes/images/")
        assert image_url.endswith("_cake.png")

        image_key = image_url.split(".amazonaws.com/", 1)[1]
        assert storage.read_object(image_key) == b"\x89PNG"
        assert storage.content_type(image_key) == "image/png"

    def test_upload_invalid_ingredients(self, client: TestClient) -> None:
        res = client.post("/upload", data={**RECIPE_FORM, "ingredients": "not json"})
        assert res.status_code == 400
        assert res.json()["message"] == "Ingredients must be valid JSON."

    def test_upload_non_numeric_duration(self, client: TestClient) -> None:
        res = client.post("/upload", data={**RECIPE_FORM, "duration": "abc"})
        assert res.status_code == 400
        assert res.json()["message"] == "Nutritional values and duration must be numbers."

    def test_upload_rejects_nan_ingredients(self, client: TestClient, storage: InMemoryStorageProvider) -> None:
        res = client.post("/upload", data={**RECIPE_FORM, "ingredients": "NaN"})
        assert res.status_code == 400
        assert res.json()["message"] == "Ingredients must be valid JSON."
        assert not storage.object_exists("recipes/recipe.csv")

    def test_upload_rejects_digit_separators(self, client: TestClient) -> None:
        res = client.post("/upload", data={**RECIPE_FORM, "duration": "1_000"})
        assert res.status_code == 400
        assert res.json()["message"] == "Nutritional values and duration must be numbers."

    def test_upload_missing_field(self, client: TestClient) -> None:
        form = {k: v for k, v in RECIPE_FORM.items() if k != "steps"}
        res = client.post("/upload", data=form)
        assert res.status_code == 400
        assert res.json()["message"] == "Missing required fields."

    def test_list_without_recipes(self, client: TestClient) -> None:
        res = client.get("/recipes")
        assert res.status_code == 404
        assert res.json()["message"] == "No recipes found"

    def test_list_and_filter(self, client: TestClient) -> None:
        client.post("/upload", data=RECIPE_FORM)
        client.post("/upload", data={**RECIPE_FORM, "username": "bob", "name": "Waffles"})

        res = client.get("/recipes")
        assert res.status_code == 200
        assert [r["name"] for r in res.json()["recipes"]] == ["Pancakes", "Waffles"]

        res = client.get("/recipes/bob")
        assert res.status_code == 200
        assert [r["name"] for r in res.json()["recipes"]] == ["Waffles"]

        res = client.get("/recipes/carol")
        assert res.status_code == 404
        assert res.json()["message"] == "No recipes found for user: carol"

    def test_delete(self, client: TestClient) -> None:
        first = client.post("/upload", data=RECIPE_FORM).json()["recipe"]["id"]
        second = client.post("/upload", data=RECIPE_FORM).json()["recipe"]["id"]
        bobs = client.post("/upload", data={**RECIPE_FORM, "username": "bob"}).json()["recipe"]["id"]

        res = client.request("DELETE", "/recipes/alice", json={"recipeIds": [first, bobs]})
        assert res.status_code == 200
        assert res.json() == {"message": "Recipes deleted successfully", "deleted": 1}

        remaining = [r["id"] for r in client.get("/recipes").json()["recipes"]]
        assert remaining == [second, bobs]

    def test_delete_no_ids(self, client: TestClient) -> None:
        client.post("/upload", data=RECIPE_FORM)
        res = client.request("DELETE", "/recipes/alice", json={"recipeIds": []})
        assert res.status_code == 400
        assert res.json()["message"] == "No recipes selected"

    def test_delete_without_collection(self, client: TestClient) -> None:
        res = client.request("DELETE", "/recipes/alice", json={"recipeIds": ["r1"]})
        assert res.status_code == 404
        assert res.json()["message"] == "No recipes found"

    def test_unexpected_error(self, client: TestClient) -> None:
        class BrokenRecipeService:
            def list_all(self):
                raise RuntimeError("boom")

        app.dependency_overrides[get_recipe_service] = lambda: BrokenRecipeService()
        res = TestClient(app, raise_server_exceptions=False).get("/recipes")
        assert res.status_code == 500
        assert res.json() == {"message": "Internal server error", "error": "boom"}
