"""
List-page view state and its transitions.

``ViewState`` is a plain serializable model owned by whoever renders
the page. It is never mutated: every transition takes a state and
returns a new one, so the rendering layer can keep, replay or post the
state as it likes.

Suggestions are debounced with tokens. Changing the search text bumps
``suggestion_token``; the renderer computes suggestions after the
debounce delay and hands them back together with the token it was
given. ``apply_suggestions`` drops results whose token is no longer the
latest one, which is how a newer keystroke supersedes a pending
computation.
"""

from __future__ import annotations

from typing import List, Tuple, Union

from pydantic import BaseModel, Field
from typing_extensions import Annotated, Literal

from ..config import LayoutMode, SortMode


class ViewState(BaseModel):
    search_text: str = ""
    sort: SortMode = "date"
    layout: LayoutMode = "masonry"
    image_errors: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    suggestion_token: int = 0
    scroll_y: float = 0.0
    compact_header: bool = False
    show_back_to_top: bool = False


def set_search(state: ViewState, text: str) -> ViewState:
    updated = state.model_copy(update={"search_text": text})
    updated, _ = schedule_suggestions(updated)
    return updated


def clear_search(state: ViewState) -> ViewState:
    return set_search(state, "")


def set_sort(state: ViewState, mode: SortMode) -> ViewState:
    return state.model_copy(update={"sort": mode})


def set_layout(state: ViewState, mode: LayoutMode) -> ViewState:
    return state.model_copy(update={"layout": mode})


def record_image_error(state: ViewState, url: str) -> ViewState:
    """Remember a failed image URL for the rest of the session."""
    if not url or url in state.image_errors:
        return state
    return state.model_copy(update={"image_errors": [*state.image_errors, url]})


def schedule_suggestions(state: ViewState) -> Tuple[ViewState, int]:
    """Start a new suggestion computation and return its token."""
    token = state.suggestion_token + 1
    return state.model_copy(update={"suggestion_token": token}), token


def apply_suggestions(state: ViewState, token: int, suggestions: List[str]) -> ViewState:
    if token != state.suggestion_token:
        return state
    return state.model_copy(update={"suggestions": list(suggestions)})


def scroll_to(
    state: ViewState,
    offset: float,
    compact_offset: float = 50,
    back_to_top_offset: float = 400,
) -> ViewState:
    return state.model_copy(
        update={
            "scroll_y": offset,
            "compact_header": offset > compact_offset,
            "show_back_to_top": offset > back_to_top_offset,
        }
    )


# ---------------------------------------------------------------------------
# Actions
#
# Tagged action models so that a client can post ``{state, action}`` and
# get the next state back; ``apply_action`` dispatches to the functions
# above.


class SetSearch(BaseModel):
    type: Literal["set_search"] = "set_search"
    text: str


class ClearSearch(BaseModel):
    type: Literal["clear_search"] = "clear_search"


class SetSort(BaseModel):
    type: Literal["set_sort"] = "set_sort"
    mode: SortMode


class SetLayout(BaseModel):
    type: Literal["set_layout"] = "set_layout"
    mode: LayoutMode


class ImageFailed(BaseModel):
    type: Literal["image_failed"] = "image_failed"
    url: str


class Scroll(BaseModel):
    type: Literal["scroll"] = "scroll"
    offset: float


class ApplySuggestions(BaseModel):
    type: Literal["apply_suggestions"] = "apply_suggestions"
    token: int
    suggestions: List[str] = Field(default_factory=list)


ViewAction = Annotated[
    Union[SetSearch, ClearSearch, SetSort, SetLayout, ImageFailed, Scroll, ApplySuggestions],
    Field(discriminator="type"),
]


def apply_action(
    state: ViewState,
    action: ViewAction,
    compact_offset: float = 50,
    back_to_top_offset: float = 400,
) -> ViewState:
    if isinstance(action, SetSearch):
        return set_search(state, action.text)
    if isinstance(action, ClearSearch):
        return clear_search(state)
    if isinstance(action, SetSort):
        return set_sort(state, action.mode)
    if isinstance(action, SetLayout):
        return set_layout(state, action.mode)
    if isinstance(action, ImageFailed):
        return record_image_error(state, action.url)
    if isinstance(action, Scroll):
        return scroll_to(state, action.offset, compact_offset, back_to_top_offset)
    if isinstance(action, ApplySuggestions):
        return apply_suggestions(state, action.token, action.suggestions)
    raise TypeError(f"Unsupported view action: {action!r}")
