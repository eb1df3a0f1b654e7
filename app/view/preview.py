"""
Image preview overlay state machine.

The overlay is either closed or open. While open the image can be
dragged (pan) and zoomed; the scale is always kept within
``[MIN_SCALE, MAX_SCALE]``. Closing, by button, by a click outside the
image or by ``Escape``, resets pan and zoom. Every operation on a
closed overlay leaves the state unchanged.
"""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, Field, computed_field
from typing_extensions import Annotated, Literal

MIN_SCALE = 0.5
MAX_SCALE = 3.0
ZOOM_IN_FACTOR = 1.2
ZOOM_OUT_FACTOR = 0.8
WHEEL_IN_FACTOR = 1.1
WHEEL_OUT_FACTOR = 0.9
CANCEL_KEY = "Escape"


class PreviewState(BaseModel):
    is_open: bool = False
    x: float = 0.0
    y: float = 0.0
    scale: float = 1.0
    dragging: bool = False
    # Pointer position minus image offset at drag start.
    drag_x: float = 0.0
    drag_y: float = 0.0

    @computed_field
    @property
    def zoom_percent(self) -> int:
        return round(self.scale * 100)


def clamp_scale(scale: float) -> float:
    return min(max(scale, MIN_SCALE), MAX_SCALE)


def open_preview(state: PreviewState) -> PreviewState:
    if state.is_open:
        return state
    return PreviewState(is_open=True)


def close_preview(state: PreviewState) -> PreviewState:
    return PreviewState()


def reset_view(state: PreviewState) -> PreviewState:
    if not state.is_open:
        return state
    return PreviewState(is_open=True)


def zoom(state: PreviewState, factor: float) -> PreviewState:
    if not state.is_open:
        return state
    return state.model_copy(update={"scale": clamp_scale(state.scale * factor)})


def zoom_in(state: PreviewState) -> PreviewState:
    return zoom(state, ZOOM_IN_FACTOR)


def zoom_out(state: PreviewState) -> PreviewState:
    return zoom(state, ZOOM_OUT_FACTOR)


def wheel_zoom(state: PreviewState, delta_y: float) -> PreviewState:
    """Scrolling down shrinks the image, scrolling up enlarges it."""
    return zoom(state, WHEEL_OUT_FACTOR if delta_y > 0 else WHEEL_IN_FACTOR)


def start_drag(state: PreviewState, pointer_x: float, pointer_y: float) -> PreviewState:
    if not state.is_open:
        return state
    return state.model_copy(
        update={"dragging": True, "drag_x": pointer_x - state.x, "drag_y": pointer_y - state.y}
    )


def move_drag(state: PreviewState, pointer_x: float, pointer_y: float) -> PreviewState:
    if not state.is_open or not state.dragging:
        return state
    return state.model_copy(update={"x": pointer_x - state.drag_x, "y": pointer_y - state.drag_y})


def end_drag(state: PreviewState) -> PreviewState:
    if not state.dragging:
        return state
    return state.model_copy(update={"dragging": False})


def handle_key(state: PreviewState, key: str) -> PreviewState:
    if state.is_open and key == CANCEL_KEY:
        return close_preview(state)
    return state


def click_backdrop(state: PreviewState, on_image: bool) -> PreviewState:
    """Clicks on the image itself keep the overlay open."""
    if state.is_open and not on_image:
        return close_preview(state)
    return state


# ---------------------------------------------------------------------------
# Actions


class Open(BaseModel):
    type: Literal["open"] = "open"


class Close(BaseModel):
    type: Literal["close"] = "close"


class Reset(BaseModel):
    type: Literal["reset"] = "reset"


class ZoomIn(BaseModel):
    type: Literal["zoom_in"] = "zoom_in"


class ZoomOut(BaseModel):
    type: Literal["zoom_out"] = "zoom_out"


class Wheel(BaseModel):
    type: Literal["wheel"] = "wheel"
    delta_y: float


class DragStart(BaseModel):
    type: Literal["drag_start"] = "drag_start"
    x: float
    y: float


class DragMove(BaseModel):
    type: Literal["drag_move"] = "drag_move"
    x: float
    y: float


class DragEnd(BaseModel):
    type: Literal["drag_end"] = "drag_end"


class KeyPress(BaseModel):
    type: Literal["key"] = "key"
    key: str


class BackdropClick(BaseModel):
    type: Literal["backdrop_click"] = "backdrop_click"
    on_image: bool = False


PreviewAction = Annotated[
    Union[Open, Close, Reset, ZoomIn, ZoomOut, Wheel, DragStart, DragMove, DragEnd, KeyPress, BackdropClick],
    Field(discriminator="type"),
]


def apply_preview_action(state: PreviewState, action: PreviewAction) -> PreviewState:
    if isinstance(action, Open):
        return open_preview(state)
    if isinstance(action, Close):
        return close_preview(state)
    if isinstance(action, Reset):
        return reset_view(state)
    if isinstance(action, ZoomIn):
        return zoom_in(state)
    if isinstance(action, ZoomOut):
        return zoom_out(state)
    if isinstance(action, Wheel):
        return wheel_zoom(state, action.delta_y)
    if isinstance(action, DragStart):
        return start_drag(state, action.x, action.y)
    if isinstance(action, DragMove):
        return move_drag(state, action.x, action.y)
    if isinstance(action, DragEnd):
        return end_drag(state)
    if isinstance(action, KeyPress):
        return handle_key(state, action.key)
    if isinstance(action, BackdropClick):
        return click_backdrop(state, action.on_image)
    raise TypeError(f"Unsupported preview action: {action!r}")
