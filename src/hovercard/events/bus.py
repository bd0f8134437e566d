from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Strong references so systems that are not stored anywhere keep receiving events.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig is not None:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float (seconds)


# ============================================================================
# INPUT & POINTER
# ============================================================================
EVENT_MOUSE_MOVE = "mouse_move"                    # payload: x, y, dx, dy
EVENT_MOUSE_PRESS_RAW = "mouse_press_raw"          # payload: x, y, button, modifiers
EVENT_POINTER_OVER = "pointer_over"                # payload: entity=int
EVENT_POINTER_OUT = "pointer_out"                  # payload: entity=int


# ============================================================================
# POPUP LIFECYCLE
# ============================================================================
EVENT_POPUP_OPENING = "popup_opening"              # payload: anchor_entity=int, token=int
EVENT_POPUP_POPULATING = "popup_populating"        # payload: anchor_entity=int, token=int
EVENT_POPUP_UPDATED = "popup_updated"              # payload: anchor_entity=int, token=int, partial=bool
EVENT_POPUP_SHOWN = "popup_shown"                  # payload: anchor_entity=int, token=int, error=str|None
EVENT_POPUP_FADING = "popup_fading"                # payload: anchor_entity=int, token=int
EVENT_POPUP_CLOSED = "popup_closed"                # payload: anchor_entity=int, token=int, reason=str
EVENT_POPUP_STALE_DISCARDED = "popup_stale_discarded"  # payload: token=int, current_token=int|None


# ============================================================================
# TOGGLES & CACHE
# ============================================================================
EVENT_TOGGLE_CLICK = "toggle_click"                # payload: toggle_entity=int
EVENT_TOGGLE_CHANGED = "toggle_changed"            # payload: toggle_entity=int, kind=str, resource=str, active=bool
EVENT_CACHE_INVALIDATED = "cache_invalidated"      # payload: key=str
