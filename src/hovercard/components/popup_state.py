from __future__ import annotations

from dataclasses import dataclass

from hovercard.components.popup_body import PopupBody
from hovercard.components.popup_phase import PopupPhase


@dataclass(slots=True)
class PopupState:
    """Single popup state shared with the rendering layer."""

    visible: bool = False
    phase: PopupPhase = PopupPhase.IDLE
    anchor_entity: int | None = None
    token: int | None = None
    body: PopupBody | None = None
    error: str | None = None
    alpha: float = 1.0
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
