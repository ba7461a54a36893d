"""
Geometry primitives shared by the detectors and the bounds guard.
"""
from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned crop region in pixel coordinates."""
    x: int
    y: int
    width: int
    height: int

    def __post_init__(self):
        for name in ('x', 'y', 'width', 'height'):
            value = getattr(self, name)
            if int(value) != value or value < 0:
                raise ValueError(f"Rectangle.{name} must be a non-negative integer, got {value!r}")
            # numpy integers sneak in from the detectors
            object.__setattr__(self, name, int(value))

    @classmethod
    def full_frame(cls, width: int, height: int) -> 'Rectangle':
        return cls(0, 0, width, height)

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    def fits_within(self, width: int, height: int) -> bool:
        return self.right <= width and self.bottom <= height

    def is_full_frame(self, width: int, height: int) -> bool:
        return self.x == 0 and self.y == 0 and self.width == width and self.height == height

    def as_box(self) -> Tuple[int, int, int, int]:
        """Return ``(left, top, right, bottom)``."""
        return self.x, self.y, self.right, self.bottom

    def to_dict(self) -> Dict[str, int]:
        return {'x': self.x, 'y': self.y, 'width': self.width, 'height': self.height}

    def __str__(self) -> str:
        return f"{self.width}x{self.height} at ({self.x}, {self.y})"
