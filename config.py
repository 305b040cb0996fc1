# config.py
"""Stores configuration constants for the application."""

import os
from dotenv import load_dotenv

# Load .env file if it exists (optional)
load_dotenv()

# --- LLM Configuration ---
RECIPE_MODEL_NAME = os.environ.get("RECIPE_MODEL_NAME", "gemini-3-flash-preview")
RECIPE_TEMPERATURE = 0.7
IMAGE_MODEL_NAME = os.environ.get("IMAGE_MODEL_NAME", "gemini-2.5-flash-image")
IMAGE_ASPECT_RATIO = "1:1"

# Checked in this order; the first one set wins
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY")

# --- Save / Export ---
DRIVE_FOLDER_URL = os.environ.get(
    "DRIVE_FOLDER_URL",
    "https://drive.google.com/drive/folders/1hJfNLbEMKnLaV2QqtuJombf_G5Mn0rkl",
)
EXPORT_DIR = os.environ.get("EXPORT_DIR", "./exports")
DEFAULT_IMAGE_NAME = "ai-recipe"
SAVE_NOTICE_SECONDS = 8

# --- Server / Logging ---
SERVER_NAME = os.environ.get("SERVER_NAME", "127.0.0.1")
SERVER_PORT = int(os.environ.get("SERVER_PORT", "7860"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# --- Page images ---
BANNER_IMAGE_URL = os.environ.get(
    "BANNER_IMAGE_URL",
    "https://images.unsplash.com/photo-1504674900247-0877df9cc836?auto=format&fit=crop&q=80&w=2000",
)
FEATURED_IMAGE_URL = os.environ.get("FEATURED_IMAGE_URL", BANNER_IMAGE_URL)

# --- User-facing text (Korean) ---
MESSAGES = {
    "empty_ingredients": "재료를 입력해주세요!",
    "recipe_failed": "레시피를 생성하는 중 오류가 발생했습니다.",
    "image_failed": "요리 이미지를 생성하지 못했습니다.",
    "edit_failed": "이미지 편집 실패",
    "save_failed": "이미지를 저장하는 중 오류가 발생했습니다.",
    "save_notice": "이미지가 저장되었습니다. 새 창에서 열린 구글 드라이브 폴더에 파일을 업로드해주세요.",
}


def get_api_key():
    """Returns the provider API key from the environment, read at call time."""
    for name in API_KEY_ENV_VARS:
        value = os.environ.get(name)
        if value:
            return value
    return None
