"""Two-state lazily loaded value."""

from enum import Enum
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class LoadState(Enum):
    """Load state of a Lazy value."""
    UNLOADED = "unloaded"
    LOADED = "loaded"


class Lazy(Generic[T]):
    """A value that is Unloaded until first read, then Loaded for good.

    The transition runs the loader exactly once. A loader that raises
    leaves the value Unloaded, so the next read tries again. The
    transition is not guarded against concurrent readers; callers are
    single-threaded.
    """

    def __init__(self, loader: Optional[Callable[[], T]] = None):
        self._loader = loader
        self._value: Optional[T] = None
        self._state = LoadState.UNLOADED

    @classmethod
    def loaded(cls, value: T) -> "Lazy[T]":
        """Create a value that starts out Loaded."""
        lazy: Lazy[T] = cls()
        lazy._value = value
        lazy._state = LoadState.LOADED
        return lazy

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def is_loaded(self) -> bool:
        return self._state is LoadState.LOADED

    def get(self) -> T:
        """Return the value, running the loader on first access."""
        if self._state is LoadState.UNLOADED:
            if self._loader is None:
                raise RuntimeError("Lazy value has no loader")
            self._value = self._loader()
            self._state = LoadState.LOADED
            self._loader = None
        return self._value  # type: ignore[return-value]

    def __repr__(self) -> str:
        if self.is_loaded:
            return f"Lazy(loaded={self._value!r})"
        return "Lazy(unloaded)"
