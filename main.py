# main.py
"""Main script to launch the Chef Nano Gradio UI."""

# Local Imports
from logger_setup import get_logger
from dependencies import LANGCHAIN_LLM_AVAILABLE, GENAI_IMAGE_AVAILABLE, API_KEY_PRESENT
from ai_gateway import AIGateway
from config import SERVER_NAME, SERVER_PORT
from ui import create_interface

logger = get_logger()


def main():
    logger.info("Application starting...")

    # Log dependency status warnings
    if not LANGCHAIN_LLM_AVAILABLE or not GENAI_IMAGE_AVAILABLE:
        logger.warning("!"*20 + "\nGemini client libraries INCOMPLETE.\n" + "Recipe or image requests will fail.\n" + "!"*20)
    if not API_KEY_PRESENT:
        logger.warning("!"*20 + "\nProvider API key missing.\n" + "Requests will be rejected by the provider.\n" + "!"*20)

    # --- One stateless gateway shared by every session ---
    gateway = AIGateway()

    logger.info("Creating Gradio interface...")
    interface = create_interface(gateway)

    logger.info(f"Launching Gradio interface on {SERVER_NAME}:{SERVER_PORT}...")
    interface.queue().launch(server_name=SERVER_NAME, server_port=SERVER_PORT, share=False)

    logger.info("Gradio interface closed.")


if __name__ == "__main__":
    main()
