"""Phases of a hover popup session."""
from enum import Enum, auto


class PopupPhase(Enum):
    IDLE = auto()
    OPENING = auto()
    POPULATING = auto()
    SHOWN = auto()
    FADING_OUT = auto()
