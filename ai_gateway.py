# ai_gateway.py
"""Outbound calls to the Gemini provider: recipe text, food image, image edit."""

import base64
import json
import time
from dataclasses import dataclass
from typing import Callable, Optional

from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import PromptTemplate
from langchain_google_genai import ChatGoogleGenerativeAI
from google import genai
from google.genai import types

# Local Imports
from config import (
    RECIPE_MODEL_NAME, RECIPE_TEMPERATURE, IMAGE_MODEL_NAME,
    IMAGE_ASPECT_RATIO, get_api_key
)
from logger_setup import get_logger

logger = get_logger()

DATA_URI_PREFIX = "data:image/png;base64,"

RECIPE_TEMPLATE = """다음 재료들을 활용한 맛있는 요리 레시피를 추천해주세요: {ingredients}.
답변은 반드시 JSON 형식으로 해주세요.
형식: {{ "title": "요리 제목", "content": "상세 레시피 내용(마크다운 형식)" }}"""

RECIPE_RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "content": {"type": "string"},
    },
    "required": ["title", "content"],
}

FOOD_IMAGE_TEMPLATE = (
    "A professional, high-quality food photography of {title}. "
    "Beautiful lighting, wooden table background, appetizing presentation."
)


class GatewayError(Exception):
    """Base class for failures raised by the gateway itself."""


class RecipeFormatError(GatewayError):
    """The recipe response was not a JSON object."""


@dataclass(frozen=True)
class RecipeResult:
    title: str
    content: str


def parse_recipe(text: Optional[str]) -> RecipeResult:
    """Parses the raw recipe response. Empty text counts as an empty object."""
    try:
        data = json.loads(text or "{}")
    except json.JSONDecodeError as e:
        raise RecipeFormatError(f"Recipe response is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise RecipeFormatError(f"Recipe response is not a JSON object: {type(data).__name__}")

    title = data.get("title") or ""
    content = data.get("content") or ""
    return RecipeResult(title=str(title), content=str(content))


def extract_image_data_uri(response) -> Optional[str]:
    """Returns the first inline image of the first candidate as a PNG data URI."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates or candidates[0].content is None:
        return None
    for part in candidates[0].content.parts or []:
        inline = part.inline_data
        if inline is not None and inline.data:
            return DATA_URI_PREFIX + base64.b64encode(inline.data).decode("utf-8")
    return None


def strip_data_uri(data_uri: str) -> bytes:
    """Drops the `data:...;base64,` prefix and decodes the payload."""
    _, sep, payload = data_uri.partition(",")
    if not sep:
        raise GatewayError("Source image is not a data URI.")
    return base64.b64decode(payload)


def _default_llm() -> ChatGoogleGenerativeAI:
    return ChatGoogleGenerativeAI(
        model=RECIPE_MODEL_NAME,
        google_api_key=get_api_key(),
        temperature=RECIPE_TEMPERATURE,
        response_mime_type="application/json",
        response_schema=RECIPE_RESPONSE_SCHEMA,
    )


def _default_client() -> genai.Client:
    return genai.Client(api_key=get_api_key())


# ==============================================================================
# AI Gateway Class
# ==============================================================================
class AIGateway:
    """
    Wraps the three provider operations. Every call builds its own LLM wrapper or
    client so credentials are resolved at call time; nothing is shared between calls.
    No retries, timeouts or caching.
    """
    def __init__(self,
                 llm_factory: Optional[Callable[[], object]] = None,
                 client_factory: Optional[Callable[[], object]] = None):
        self._llm_factory = llm_factory or _default_llm
        self._client_factory = client_factory or _default_client

    async def request_recipe(self, ingredients_text: str) -> RecipeResult:
        start_time = time.time()
        logger.info(f"Gateway: Requesting recipe for ingredients '{ingredients_text}' ({RECIPE_MODEL_NAME})")
        prompt = PromptTemplate.from_template(RECIPE_TEMPLATE)
        recipe_chain = prompt | self._llm_factory() | StrOutputParser()
        raw_text = await recipe_chain.ainvoke({"ingredients": ingredients_text})
        recipe = parse_recipe(raw_text)
        logger.info(f"Gateway: Recipe '{recipe.title}' received ({time.time() - start_time:.2f}s)")
        return recipe

    async def request_food_image(self, dish_title: str) -> Optional[str]:
        start_time = time.time()
        logger.info(f"Gateway: Requesting food image for '{dish_title}' ({IMAGE_MODEL_NAME})")
        client = self._client_factory()
        response = await client.aio.models.generate_content(
            model=IMAGE_MODEL_NAME,
            contents=[FOOD_IMAGE_TEMPLATE.format(title=dish_title)],
            config=types.GenerateContentConfig(
                image_config=types.ImageConfig(aspect_ratio=IMAGE_ASPECT_RATIO),
            ),
        )
        image_uri = extract_image_data_uri(response)
        if image_uri is None:
            logger.warning(f"Gateway: No inline image returned for '{dish_title}'.")
        else:
            logger.info(f"Gateway: Food image received ({time.time() - start_time:.2f}s)")
        return image_uri

    async def request_image_edit(self, source_image_data_uri: str, edit_instruction_text: str) -> Optional[str]:
        start_time = time.time()
        logger.info(f"Gateway: Requesting image edit '{edit_instruction_text}' ({IMAGE_MODEL_NAME})")
        image_bytes = strip_data_uri(source_image_data_uri)
        client = self._client_factory()
        response = await client.aio.models.generate_content(
            model=IMAGE_MODEL_NAME,
            contents=[
                types.Part.from_bytes(data=image_bytes, mime_type="image/png"),
                edit_instruction_text,
            ],
        )
        image_uri = extract_image_data_uri(response)
        if image_uri is None:
            logger.warning("Gateway: Image edit returned no inline image.")
        else:
            logger.info(f"Gateway: Edited image received ({time.time() - start_time:.2f}s)")
        return image_uri
