"""Shared fixtures: a mocked gateway and helpers for building provider responses."""

import base64
from unittest.mock import AsyncMock, Mock

import pytest
from google.genai import types

from ai_gateway import RecipeResult
from app_state import StateStore
from controller import KitchenController

# 1x1 transparent PNG
PNG_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mP8/x8AAwMCAO+X2f8AAAAASUVORK5CYII="
)
PNG_DATA_URI = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode("utf-8")


def image_response(*parts: types.Part) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=list(parts)))]
    )


def inline_png(data: bytes = PNG_BYTES) -> types.Part:
    return types.Part(inline_data=types.Blob(data=data, mime_type="image/png"))


async def drain(flow):
    """Collects every state an async controller flow yields."""
    return [state async for state in flow]


@pytest.fixture
def gateway():
    mock = Mock()
    mock.request_recipe = AsyncMock(return_value=RecipeResult(title="Kimchi Stew", content="Step 1..."))
    mock.request_food_image = AsyncMock(return_value=PNG_DATA_URI)
    mock.request_image_edit = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def store():
    return StateStore()


@pytest.fixture
def controller(store, gateway):
    return KitchenController(store, gateway)
