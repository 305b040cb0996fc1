# controller.py
"""Turns user actions into state transitions and gateway calls."""

from pathlib import Path
from typing import AsyncIterator, Optional, Union

from ai_gateway import AIGateway
from app_state import (
    AppState, StateStore, IngredientsEdited, EditPromptEdited, IngredientsRejected,
    RecipeRequested, RecipeSucceeded, RecipeFailed, ImageSucceeded, ImageFailed,
    EditRequested, EditSucceeded, EditFailed, ExportFailed
)
from config import EXPORT_DIR
from export import ExportResult, ShareTarget, save_image
from logger_setup import get_logger

logger = get_logger()


class KitchenController:
    """
    Drives the recipe, edit and save flows for one session's `StateStore`.

    The recipe and edit flows are async generators that yield the state after
    each transition so the view can render intermediate results.
    """
    def __init__(self, store: StateStore, gateway: AIGateway):
        self.store = store
        self.gateway = gateway

    @property
    def state(self) -> AppState:
        return self.store.state

    async def submit_ingredients(self, ingredients_text: str) -> AsyncIterator[AppState]:
        self.store.dispatch(IngredientsEdited(ingredients_text))
        if not ingredients_text or not ingredients_text.strip():
            logger.info("Controller: Empty ingredients rejected.")
            yield self.store.dispatch(IngredientsRejected())
            return

        state = self.store.dispatch(RecipeRequested())
        generation = state.recipe_generation
        yield state

        try:
            recipe = await self.gateway.request_recipe(ingredients_text)
        except Exception as e:
            logger.exception(f"Controller: Recipe generation failed (gen {generation}): {e}")
            yield self.store.dispatch(RecipeFailed(generation))
            return
        yield self.store.dispatch(RecipeSucceeded(generation, recipe))
        if self.store.state.recipe_generation != generation:
            logger.info(f"Controller: Recipe gen {generation} superseded; skipping its image.")
            return

        try:
            image_uri = await self.gateway.request_food_image(recipe.title)
        except Exception as e:
            logger.exception(f"Controller: Image generation failed (gen {generation}): {e}")
            yield self.store.dispatch(ImageFailed(generation))
            return
        yield self.store.dispatch(ImageSucceeded(generation, image_uri))

    async def edit_image(self, edit_instruction_text: str) -> AsyncIterator[AppState]:
        state = self.store.state
        if (not state.has_image or not edit_instruction_text or not edit_instruction_text.strip()
                or state.image_edit_in_flight):
            logger.info("Controller: Edit ignored (no image, empty instruction or edit pending).")
            return

        self.store.dispatch(EditPromptEdited(edit_instruction_text))
        state = self.store.dispatch(EditRequested())
        generation, edit_generation = state.recipe_generation, state.edit_generation
        yield state

        try:
            image_uri = await self.gateway.request_image_edit(state.image_data_uri, edit_instruction_text)
        except Exception as e:
            logger.exception(f"Controller: Image edit failed: {e}")
            yield self.store.dispatch(EditFailed(generation, edit_generation))
            return
        yield self.store.dispatch(EditSucceeded(generation, edit_generation, image_uri))

    def save_image(self,
                   share_target: Optional[ShareTarget] = None,
                   export_dir: Union[str, Path] = EXPORT_DIR) -> Optional[ExportResult]:
        state = self.store.state
        if not state.has_image:
            return None
        title = state.recipe.title if state.recipe else None
        try:
            return save_image(state.image_data_uri, title, export_dir, share_target)
        except Exception as e:
            logger.exception(f"Controller: Saving image failed: {e}")
            self.store.dispatch(ExportFailed())
            return None
