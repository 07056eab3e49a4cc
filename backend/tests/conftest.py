"""
Pytest configuration and shared fixtures.

Fixtures defined here are available to all tests.
"""

import base64
import io
import os
import sys
from itertools import count
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

# Add backend to path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Set test environment
os.environ["TESTING"] = "true"


# =============================================================================
# Fake Supabase
# =============================================================================


class FakeQuery:
    """Records a PostgREST-style call chain and answers ``execute()`` from FakeSupabase."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.calls: list[tuple] = []

    def _write(self, op, payload=None):
        self.op = op
        self.payload = payload
        self.calls.append((op, payload))
        return self

    def select(self, *args, **kwargs):
        self.calls.append(("select", args))
        return self

    def insert(self, payload):
        return self._write("insert", payload)

    def update(self, payload):
        return self._write("update", payload)

    def upsert(self, payload):
        return self._write("upsert", payload)

    def delete(self):
        return self._write("delete")

    def __getattr__(self, name):
        # eq, gte, lte, in_, or_, ilike, is_, order, limit
        def _chain(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return _chain

    def filters(self, name: str) -> list[tuple]:
        return [c[1] for c in self.calls if c[0] == name]

    def execute(self):
        self.db.executed.append(self)
        return SimpleNamespace(data=self.db.next_result(self))


class FakeSupabase:
    """In-memory stand-in for the supabase ``Client``.

    Responses are queued per (table, operation). The last queued response
    for a key is sticky. Inserts without a queued response echo the payload
    back with generated IDs.
    """

    def __init__(self):
        self.responses: dict[tuple[str, str], list] = {}
        self.executed: list[FakeQuery] = []
        self._ids = count(1)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def respond(self, table: str, op: str, *data: list) -> "FakeSupabase":
        self.responses.setdefault((table, op), []).extend(data)
        return self

    def next_result(self, query: FakeQuery) -> list:
        queue = self.responses.get((query.table, query.op))
        if queue:
            return queue.pop(0) if len(queue) > 1 else queue[0]
        if query.op == "insert":
            rows = query.payload if isinstance(query.payload, list) else [query.payload]
            return [{"id": f"gen-{next(self._ids)}", **row} for row in rows]
        return []

    def queries(self, table: str, op: str | None = None) -> list[FakeQuery]:
        return [q for q in self.executed if q.table == table and (op is None or q.op == op)]


# =============================================================================
# App Fixtures
# =============================================================================


@pytest.fixture
def app():
    """FastAPI test application."""
    from app.main import app
    return app


@pytest.fixture
def client(app):
    """Sync test client for API tests."""
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture
async def async_client(app):
    """Async test client for API tests."""
    from httpx import AsyncClient, ASGITransport
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


@pytest.fixture
def override_db(app, fake_db):
    """Route every request's database dependency to the fake client."""
    from app.api.deps import get_db
    app.dependency_overrides[get_db] = lambda: fake_db
    yield fake_db
    app.dependency_overrides.pop(get_db, None)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def mock_supabase():
    """Mock Supabase client for unit tests."""
    mock = MagicMock()
    mock.table.return_value.select.return_value.execute.return_value.data = []
    mock.table.return_value.select.return_value.limit.return_value.execute.return_value.data = []
    mock.table.return_value.insert.return_value.execute.return_value.data = [{"id": "test-uuid"}]
    mock.table.return_value.update.return_value.execute.return_value.data = [{}]
    mock.table.return_value.delete.return_value.execute.return_value.data = [{}]
    return mock


@pytest.fixture
def fake_db():
    return FakeSupabase()


@pytest.fixture
def test_user_id():
    """Test user ID for database operations."""
    return "test-user-00000000-0000-0000-0000-000000000000"


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def sample_meal_plan(test_user_id):
    """A Monday-Sunday plan row."""
    return {
        "id": "plan-uuid",
        "user_id": test_user_id,
        "name": "Week of March 3",
        "start_date": "2025-03-03",
        "end_date": "2025-03-09",
    }


@pytest.fixture
def sample_entries():
    """Entry rows joined with recipes(title): Soup twice, Stew once."""
    return [
        {
            "id": "entry-1",
            "meal_plan_id": "plan-uuid",
            "meal_date": "2025-03-03",
            "meal_type": "dinner",
            "recipe_id": "recipe-soup",
            "servings": 2,
            "recipes": {"title": "Soup"},
        },
        {
            "id": "entry-2",
            "meal_plan_id": "plan-uuid",
            "meal_date": "2025-03-05",
            "meal_type": "lunch",
            "recipe_id": "recipe-soup",
            "servings": 1,
            "recipes": {"title": "Soup"},
        },
        {
            "id": "entry-3",
            "meal_plan_id": "plan-uuid",
            "meal_date": "2025-03-05",
            "meal_type": "breakfast",
            "recipe_id": "recipe-stew",
            "servings": None,
            "recipes": {"title": "Stew"},
        },
    ]


@pytest.fixture
def sample_ingredient_rows():
    """recipe_ingredients rows for the sample recipes."""
    return [
        {"recipe_id": "recipe-soup", "ingredient_name": "Carrot", "quantity": 1, "unit": "pcs"},
        {"recipe_id": "recipe-soup", "ingredient_name": "salt", "quantity": 5, "unit": "g"},
        {"recipe_id": "recipe-stew", "ingredient_name": "Salt", "quantity": 2, "unit": "g"},
        {"recipe_id": "recipe-stew", "ingredient_name": "Beef", "quantity": 0.5, "unit": "kg"},
    ]


@pytest.fixture
def sample_recipe(test_user_id):
    return {
        "id": "recipe-soup",
        "user_id": test_user_id,
        "title": "Soup",
        "description": "Vegetable soup",
        "image_url": None,
        "prep_time": 10,
        "cook_time": 40,
        "servings": 4,
        "calories_per_serving": 250,
        "category_id": None,
        "is_public": True,
    }


# =============================================================================
# Utility Fixtures
# =============================================================================


@pytest.fixture
def temp_image(tmp_path):
    """Create a temporary test image."""
    from PIL import Image

    img = Image.new('RGB', (100, 100), color='white')
    img_path = tmp_path / "test_recipe.png"
    img.save(img_path)

    return img_path


@pytest.fixture
def image_bytes(temp_image):
    """Get image as bytes."""
    return temp_image.read_bytes()


@pytest.fixture
def image_data_url(image_bytes):
    """The test image as an inline data URL."""
    return "data:image/png;base64," + base64.b64encode(image_bytes).decode()


@pytest.fixture
def bmp_data_url():
    """A real image in a format recipes do not accept."""
    from PIL import Image

    buffer = io.BytesIO()
    Image.new('RGB', (10, 10), color='red').save(buffer, format="BMP")
    return "data:image/bmp;base64," + base64.b64encode(buffer.getvalue()).decode()
