"""
Tests for the AI gateway.

The recipe chain runs against LangChain's FakeListChatModel and the image calls
against a mocked Gen AI client returning real `google.genai.types` responses,
so no network calls are made.
"""

import base64
from unittest.mock import AsyncMock, Mock

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from ai_gateway import (
    AIGateway, GatewayError, RecipeFormatError, RecipeResult,
    extract_image_data_uri, parse_recipe, strip_data_uri
)
from conftest import PNG_BYTES, PNG_DATA_URI, image_response, inline_png
from google.genai import types


def fake_client(response):
    client = Mock()
    client.aio.models.generate_content = AsyncMock(return_value=response)
    return client


class TestParseRecipe:
    """Test cases for recipe response parsing."""

    def test_parses_title_and_content(self):
        """Test that a well-formed object becomes a RecipeResult."""
        recipe = parse_recipe('{"title": "Kimchi Stew", "content": "Step 1..."}')
        assert recipe == RecipeResult(title="Kimchi Stew", content="Step 1...")

    def test_empty_text_gives_empty_recipe(self):
        """Test that empty response text is treated as an empty object."""
        assert parse_recipe("") == RecipeResult(title="", content="")
        assert parse_recipe(None) == RecipeResult(title="", content="")

    def test_invalid_json_raises(self):
        """Test that non-JSON text fails loudly."""
        with pytest.raises(RecipeFormatError):
            parse_recipe("Here is your recipe: stew")

    def test_non_object_raises(self):
        """Test that a JSON array is not accepted as a recipe."""
        with pytest.raises(RecipeFormatError):
            parse_recipe('["Kimchi Stew"]')

    def test_format_error_is_gateway_error(self):
        assert issubclass(RecipeFormatError, GatewayError)


class TestImageExtraction:
    """Test cases for picking the inline image out of a response."""

    def test_first_inline_image_becomes_data_uri(self):
        """Test that text parts are skipped and the first image is encoded."""
        response = image_response(types.Part(text="Here you go"), inline_png(), inline_png(b"second"))
        assert extract_image_data_uri(response) == PNG_DATA_URI

    def test_no_inline_image_returns_none(self):
        response = image_response(types.Part(text="I cannot draw that"))
        assert extract_image_data_uri(response) is None

    def test_no_candidates_returns_none(self):
        assert extract_image_data_uri(types.GenerateContentResponse(candidates=[])) is None

    def test_strip_data_uri(self):
        assert strip_data_uri(PNG_DATA_URI) == PNG_BYTES

    def test_strip_data_uri_without_prefix_raises(self):
        with pytest.raises(GatewayError):
            strip_data_uri("not-a-data-uri")


class TestRequestRecipe:
    """Test cases for the recipe request chain."""

    @pytest.mark.asyncio
    async def test_request_recipe_returns_parsed_result(self):
        llm = FakeListChatModel(responses=['{"title": "Garlic Pork Stir-fry", "content": "1. Slice the pork."}'])
        gateway = AIGateway(llm_factory=lambda: llm)

        recipe = await gateway.request_recipe("pork, scallion, garlic")

        assert recipe.title == "Garlic Pork Stir-fry"
        assert recipe.content == "1. Slice the pork."

    @pytest.mark.asyncio
    async def test_request_recipe_propagates_format_error(self):
        llm = FakeListChatModel(responses=["sorry, no JSON today"])
        gateway = AIGateway(llm_factory=lambda: llm)

        with pytest.raises(RecipeFormatError):
            await gateway.request_recipe("egg")

    @pytest.mark.asyncio
    async def test_request_recipe_builds_llm_per_call(self):
        """Test that credentials/LLM are resolved for every call, not cached."""
        factory = Mock(side_effect=lambda: FakeListChatModel(responses=['{"title": "A", "content": "B"}']))
        gateway = AIGateway(llm_factory=factory)

        await gateway.request_recipe("egg")
        await gateway.request_recipe("rice")

        assert factory.call_count == 2


class TestRequestImages:
    """Test cases for image generation and editing."""

    @pytest.mark.asyncio
    async def test_food_image_returns_data_uri(self):
        client = fake_client(image_response(inline_png()))
        gateway = AIGateway(client_factory=lambda: client)

        image = await gateway.request_food_image("Kimchi Stew")

        assert image == PNG_DATA_URI
        kwargs = client.aio.models.generate_content.call_args.kwargs
        assert "Kimchi Stew" in kwargs["contents"][0]
        assert kwargs["config"].image_config.aspect_ratio == "1:1"

    @pytest.mark.asyncio
    async def test_food_image_without_payload_returns_none(self):
        client = fake_client(image_response(types.Part(text="no image")))
        gateway = AIGateway(client_factory=lambda: client)

        assert await gateway.request_food_image("Kimchi Stew") is None

    @pytest.mark.asyncio
    async def test_image_edit_sends_raw_bytes_and_instruction(self):
        edited = b"edited-png-bytes"
        client = fake_client(image_response(inline_png(edited)))
        gateway = AIGateway(client_factory=lambda: client)

        image = await gateway.request_image_edit(PNG_DATA_URI, "make it brighter")

        assert image == "data:image/png;base64," + base64.b64encode(edited).decode("utf-8")
        contents = client.aio.models.generate_content.call_args.kwargs["contents"]
        assert contents[0].inline_data.data == PNG_BYTES
        assert contents[0].inline_data.mime_type == "image/png"
        assert contents[1] == "make it brighter"

    @pytest.mark.asyncio
    async def test_image_edit_propagates_transport_error(self):
        client = Mock()
        client.aio.models.generate_content = AsyncMock(side_effect=ConnectionError("offline"))
        gateway = AIGateway(client_factory=lambda: client)

        with pytest.raises(ConnectionError):
            await gateway.request_image_edit(PNG_DATA_URI, "make it brighter")
