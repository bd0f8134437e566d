from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ToggleState:
    """Two-state button mirroring an external resource.

    ``active`` means the resource is currently added, so the button offers the
    removing action and carries the ``remove`` style.
    """

    kind: str
    resource: str
    on_text: str
    off_text: str
    on_title: str = ""
    off_title: str = ""
    active: bool = False
    visible: bool = True
    pending: bool = False
    css_classes: tuple[str, ...] = ()

    @property
    def text(self) -> str:
        return self.off_text if self.active else self.on_text

    @property
    def title(self) -> str:
        return self.off_title if self.active else self.on_title

    @property
    def removes(self) -> bool:
        return self.active

    def set_state(self, active: bool) -> None:
        self.active = bool(active)

    def class_list(self) -> tuple[str, ...]:
        if self.active:
            return self.css_classes + ("remove",)
        return self.css_classes
