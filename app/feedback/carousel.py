"""Rotating window over a list of items (reviews, styles)."""

from typing import Generic, List, Sequence, TypeVar

T = TypeVar("T")

ROTATE_SECONDS = 5


class Carousel(Generic[T]):
    """A ``per_view``-wide window that wraps at both ends.
    
    When every item fits in the window there is nothing to rotate and all
    navigation is a no-op.
    """

    def __init__(self, items: Sequence[T], per_view: int = 1, start: int = 0) -> None:
        if per_view < 1:
            raise ValueError("per_view must be positive")
        self.items: List[T] = list(items)
        self.per_view = per_view
        self.index = 0
        self.go_to(start)

    @property
    def can_rotate(self) -> bool:
        return len(self.items) > self.per_view

    @property
    def last_start(self) -> int:
        return max(0, len(self.items) - self.per_view)

    @property
    def visible(self) -> List[T]:
        return self.items[self.index:self.index + self.per_view]

    @property
    def positions(self) -> range:
        """Indicator positions (valid window starts)."""
        return range(self.last_start + 1)

    def next(self) -> int:
        if self.can_rotate:
            self.index = 0 if self.index >= self.last_start else self.index + 1
        return self.index

    def prev(self) -> int:
        if self.can_rotate:
            self.index = self.last_start if self.index == 0 else self.index - 1
        return self.index

    def go_to(self, position: int) -> int:
        if self.can_rotate:
            self.index = position % (self.last_start + 1)
        else:
            self.index = 0
        return self.index

    def tick(self) -> int:
        """Timer step."""
        return self.next()
