from dataclasses import dataclass


@dataclass(slots=True)
class Bounds:
    """Screen rectangle used for pointer hit-testing.

    ``layer`` orders overlapping rectangles: only hits on the highest layer
    under the pointer count as hovered.
    """

    x: float
    y: float
    width: float
    height: float
    layer: int = 0

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px <= self.x + self.width and self.y <= py <= self.y + self.height
