from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class PopupHeader:
    link_text: str
    link_href: str
    subscribe_toggle: int | None = None
    multi_counts: str = ""


@dataclass(slots=True)
class DetailRow:
    label: str
    value: str


@dataclass(slots=True)
class PopupBody:
    """Rendered popup content. Toggle widgets are referenced by entity id."""

    header: PopupHeader
    rows: list[DetailRow] = field(default_factory=list)
    toggle_entities: list[int] = field(default_factory=list)
    css_class: str = ""

    def owned_toggles(self) -> list[int]:
        owned = list(self.toggle_entities)
        if self.header.subscribe_toggle is not None:
            owned.append(self.header.subscribe_toggle)
        return owned

    def detail(self, label: str) -> str | None:
        for row in self.rows:
            if row.label == label:
                return row.value
        return None

    def text(self) -> str:
        """Flatten the body into plain text, mainly for logs and assertions."""
        parts = [self.header.link_text]
        if self.header.multi_counts:
            parts.append(self.header.multi_counts)
        parts.extend(f"{row.label} {row.value}" for row in self.rows)
        return "\n".join(parts)
