# app_state.py
"""
Application state for one page session.

`AppState` is immutable. Every change goes through `reduce(state, action)`, which
returns a new state built with `dataclasses.replace`. `StateStore` owns the
current state for a session and is the only place it gets swapped.

Each of the three flows (recipe, image, edit) has its own `FlowStatus`. Results
carry the generation counters captured when their request started; a result
whose generation no longer matches is stale and leaves the state untouched.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, Optional, Type

from ai_gateway import RecipeResult
from config import MESSAGES


class FlowStatus(Enum):
    IDLE = "idle"
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


class Severity(Enum):
    INLINE = "inline"
    MODAL = "modal"


class ErrorKind(Enum):
    VALIDATION = "validation"
    RECIPE = "recipe"
    IMAGE = "image"
    EDIT = "edit"
    EXPORT = "export"


_MODAL_KINDS = {ErrorKind.EXPORT}


@dataclass(frozen=True)
class AppError:
    kind: ErrorKind
    message: str

    @property
    def severity(self) -> Severity:
        return Severity.MODAL if self.kind in _MODAL_KINDS else Severity.INLINE


@dataclass(frozen=True)
class AppState:
    ingredients_text: str = ""
    recipe: Optional[RecipeResult] = None
    image_data_uri: Optional[str] = None
    recipe_status: FlowStatus = FlowStatus.IDLE
    image_status: FlowStatus = FlowStatus.IDLE
    edit_status: FlowStatus = FlowStatus.IDLE
    edit_prompt_text: str = ""
    error: Optional[AppError] = None
    recipe_generation: int = 0
    edit_generation: int = 0

    @property
    def recipe_in_flight(self) -> bool:
        return self.recipe_status is FlowStatus.PENDING

    @property
    def image_in_flight(self) -> bool:
        return self.image_status is FlowStatus.PENDING

    @property
    def image_edit_in_flight(self) -> bool:
        return self.edit_status is FlowStatus.PENDING

    @property
    def has_image(self) -> bool:
        return bool(self.image_data_uri)

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error else None


# ==============================================================================
# Actions
# ==============================================================================
@dataclass(frozen=True)
class IngredientsEdited:
    text: str


@dataclass(frozen=True)
class EditPromptEdited:
    text: str


@dataclass(frozen=True)
class IngredientsRejected:
    pass


@dataclass(frozen=True)
class RecipeRequested:
    pass


@dataclass(frozen=True)
class RecipeSucceeded:
    generation: int
    recipe: RecipeResult


@dataclass(frozen=True)
class RecipeFailed:
    generation: int


@dataclass(frozen=True)
class ImageSucceeded:
    generation: int
    image_data_uri: Optional[str]


@dataclass(frozen=True)
class ImageFailed:
    generation: int


@dataclass(frozen=True)
class EditRequested:
    pass


@dataclass(frozen=True)
class EditSucceeded:
    generation: int
    edit_generation: int
    image_data_uri: Optional[str]


@dataclass(frozen=True)
class EditFailed:
    generation: int
    edit_generation: int


@dataclass(frozen=True)
class ExportFailed:
    message: str = field(default_factory=lambda: MESSAGES["save_failed"])


@dataclass(frozen=True)
class ErrorDismissed:
    pass


# ==============================================================================
# Transitions
# ==============================================================================
def _is_current_recipe(state: AppState, action) -> bool:
    return action.generation == state.recipe_generation


def _is_current_edit(state: AppState, action) -> bool:
    return (action.generation == state.recipe_generation
            and action.edit_generation == state.edit_generation)


def _ingredients_edited(state, action):
    return replace(state, ingredients_text=action.text)


def _edit_prompt_edited(state, action):
    return replace(state, edit_prompt_text=action.text)


def _ingredients_rejected(state, action):
    return replace(state, error=AppError(ErrorKind.VALIDATION, MESSAGES["empty_ingredients"]))


def _recipe_requested(state, action):
    return replace(
        state,
        recipe=None,
        image_data_uri=None,
        error=None,
        recipe_status=FlowStatus.PENDING,
        image_status=FlowStatus.PENDING,
        edit_status=FlowStatus.IDLE,
        recipe_generation=state.recipe_generation + 1,
    )


def _recipe_succeeded(state, action):
    if not _is_current_recipe(state, action):
        return state
    return replace(state, recipe=action.recipe, recipe_status=FlowStatus.READY)


def _recipe_failed(state, action):
    if not _is_current_recipe(state, action):
        return state
    return replace(
        state,
        recipe=None,
        image_data_uri=None,
        recipe_status=FlowStatus.FAILED,
        image_status=FlowStatus.FAILED,
        error=AppError(ErrorKind.RECIPE, MESSAGES["recipe_failed"]),
    )


def _image_succeeded(state, action):
    if not _is_current_recipe(state, action):
        return state
    return replace(state, image_data_uri=action.image_data_uri, image_status=FlowStatus.READY)


def _image_failed(state, action):
    # The recipe obtained before the failure is kept
    if not _is_current_recipe(state, action):
        return state
    return replace(
        state,
        image_status=FlowStatus.FAILED,
        error=AppError(ErrorKind.IMAGE, MESSAGES["image_failed"]),
    )


def _edit_requested(state, action):
    return replace(
        state,
        edit_status=FlowStatus.PENDING,
        error=None,
        edit_generation=state.edit_generation + 1,
    )


def _edit_succeeded(state, action):
    if not _is_current_edit(state, action):
        return state
    if action.image_data_uri is None:
        return replace(state, edit_status=FlowStatus.READY)
    return replace(
        state,
        image_data_uri=action.image_data_uri,
        edit_prompt_text="",
        edit_status=FlowStatus.READY,
    )


def _edit_failed(state, action):
    if not _is_current_edit(state, action):
        return state
    return replace(
        state,
        edit_status=FlowStatus.FAILED,
        error=AppError(ErrorKind.EDIT, MESSAGES["edit_failed"]),
    )


def _export_failed(state, action):
    return replace(state, error=AppError(ErrorKind.EXPORT, action.message))


def _error_dismissed(state, action):
    return replace(state, error=None)


_TRANSITIONS: Dict[Type, Callable[[AppState, object], AppState]] = {
    IngredientsEdited: _ingredients_edited,
    EditPromptEdited: _edit_prompt_edited,
    IngredientsRejected: _ingredients_rejected,
    RecipeRequested: _recipe_requested,
    RecipeSucceeded: _recipe_succeeded,
    RecipeFailed: _recipe_failed,
    ImageSucceeded: _image_succeeded,
    ImageFailed: _image_failed,
    EditRequested: _edit_requested,
    EditSucceeded: _edit_succeeded,
    EditFailed: _edit_failed,
    ExportFailed: _export_failed,
    ErrorDismissed: _error_dismissed,
}


def reduce(state: AppState, action) -> AppState:
    """Returns the state that results from applying `action` to `state`."""
    try:
        transition = _TRANSITIONS[type(action)]
    except KeyError:
        raise TypeError(f"Unknown action: {action!r}") from None
    return transition(state, action)


class StateStore:
    """Owns the current `AppState` of one session."""

    def __init__(self, initial: Optional[AppState] = None):
        self._state = initial or AppState()

    @property
    def state(self) -> AppState:
        return self._state

    def dispatch(self, action) -> AppState:
        self._state = reduce(self._state, action)
        return self._state
