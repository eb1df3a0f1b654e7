"""
Route definitions for the view-state API.

Endpoints under /api/view:
- POST /state    : apply one action to a list-page ``ViewState``
- POST /preview  : apply one action to an image ``PreviewState``

The server keeps no session state; the client sends the current state
with every action and stores whatever comes back.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..config import Settings, get_settings
from .preview import PreviewAction, PreviewState, apply_preview_action
from .state import ViewAction, ViewState, apply_action

router = APIRouter(prefix="/api/view", tags=["view"])


class ViewStep(BaseModel):
    state: ViewState = Field(default_factory=ViewState)
    action: ViewAction


class PreviewStep(BaseModel):
    state: PreviewState = Field(default_factory=PreviewState)
    action: PreviewAction


@router.post("/state", response_model=ViewState)
def step_view_state(step: ViewStep, settings: Settings = Depends(get_settings)) -> ViewState:
    return apply_action(
        step.state,
        step.action,
        compact_offset=settings.compact_header_offset,
        back_to_top_offset=settings.back_to_top_offset,
    )


@router.post("/preview", response_model=PreviewState)
def step_preview(step: PreviewStep) -> PreviewState:
    return apply_preview_action(step.state, step.action)
