from __future__ import annotations

from dataclasses import dataclass

from hovercard.components.popup_body import PopupBody
from hovercard.components.popup_phase import PopupPhase


@dataclass(slots=True)
class PopupSession:
    """One hover-triggered lifecycle bound to an anchor entity.

    The anchor is referenced by entity id only; the session never owns it.
    """

    anchor_entity: int
    token: int
    open_delay: float
    fade_delay: float
    fade_speed: float
    width: float
    phase: PopupPhase = PopupPhase.OPENING
    elapsed: float = 0.0
    body: PopupBody | None = None
    error: str | None = None
    populate_invoked: bool = False
