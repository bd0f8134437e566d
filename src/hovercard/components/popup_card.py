from dataclasses import dataclass


@dataclass(slots=True)
class PopupCard:
    """Marks the entity whose Bounds describe the visible popup card."""

    token: int | None = None
