from __future__ import annotations

from esper import World

from hovercard.components.anchor import Anchor
from hovercard.components.bounds import Bounds


def create_anchor(
    world: World,
    href: str,
    *,
    text: str = "",
    classes: tuple[str, ...] = (),
    container_classes: tuple[str, ...] = (),
    bounds: Bounds | None = None,
) -> int:
    """Create a link entity, optionally placed on screen for hit-testing."""
    components: list[object] = [
        Anchor(href=href, text=text, classes=classes, container_classes=container_classes)
    ]
    if bounds is not None:
        components.append(bounds)
    return world.create_entity(*components)
