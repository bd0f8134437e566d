from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urlsplit


@dataclass(slots=True)
class Anchor:
    """A hoverable link on the page.

    ``container_classes`` lists the classes of the enclosing blocks (``md``
    marks user-authored markdown), mirroring descendant selectors.
    """

    href: str
    text: str = ""
    classes: tuple[str, ...] = ()
    container_classes: tuple[str, ...] = ()
    page_host: str = "www.reddit.com"

    @property
    def hostname(self) -> str:
        host = urlsplit(self.href).hostname
        return host or self.page_host

    @property
    def pathname(self) -> str:
        return urlsplit(self.href).path or "/"

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def inside(self, container_class: str) -> bool:
        return container_class in self.container_classes
