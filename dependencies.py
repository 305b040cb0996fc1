# dependencies.py
"""Checks necessary dependencies and sets availability flags."""

from logger_setup import get_logger
from config import get_api_key, API_KEY_ENV_VARS

logger = get_logger()

# --- LangChain Core & LLM Check (recipe text) ---
LANGCHAIN_LLM_AVAILABLE = False
try:
    from langchain_core.prompts import PromptTemplate
    from langchain_core.output_parsers import StrOutputParser
    from langchain_google_genai import ChatGoogleGenerativeAI
    LANGCHAIN_LLM_AVAILABLE = True
    logger.info("LangChain Gemini LLM dependencies check: OK.")
except ImportError as e:
    logger.error(f"Import check failed for LangChain LLM components: {e}")
    logger.error("<<<<< Please ensure 'langchain-google-genai' and 'langchain-core' are installed >>>>>")

# --- Gen AI SDK Check (image generation / editing) ---
GENAI_IMAGE_AVAILABLE = False
try:
    from google import genai
    from google.genai import types
    GENAI_IMAGE_AVAILABLE = True
    logger.info("Google Gen AI SDK check: OK.")
except ImportError as e:
    logger.error(f"Import check failed for the Google Gen AI SDK: {e}")
    logger.error("<<<<< Please ensure 'google-genai' is installed >>>>>")

# --- API Key Check ---
# Only reported here; calls resolve the key themselves and the provider rejects a missing one.
API_KEY_PRESENT = bool(get_api_key())
if API_KEY_PRESENT:
    logger.info("Provider API key found.")
else:
    logger.warning(f"No provider API key found (checked {', '.join(API_KEY_ENV_VARS)} and .env).")

# Log final decisions
if not LANGCHAIN_LLM_AVAILABLE: logger.warning("LangChain LLM setup incomplete - recipe generation will fail.")
if not GENAI_IMAGE_AVAILABLE: logger.warning("Gen AI SDK missing - image generation and editing will fail.")

# --- Export flags ---
__all__ = ['LANGCHAIN_LLM_AVAILABLE', 'GENAI_IMAGE_AVAILABLE', 'API_KEY_PRESENT']
