"""Observable state holders for view-models.

MutableStateFlow keeps the current value and notifies subscribers when it
changes. Equal values are conflated: setting a value equal to the current
one notifies nobody.
"""

from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")



class StateFlow(Generic[T]):
    """Read-only view of a MutableStateFlow."""

    def __init__(self, source: "MutableStateFlow[T]") -> None:
        self._source = source

    @property
    def value(self) -> T:
        return self._source.value

    def subscribe(self, listener: Callable[[T], None]) -> Callable[[], None]:
        return self._source.subscribe(listener)


class MutableStateFlow(Generic[T]):
    def __init__(self, initial: T) -> None:
        self._value = initial
        self._listeners: list[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        if new_value == self._value:
            return
        self._value = new_value
        for listener in list(self._listeners):
            listener(new_value)

    def update(self, fn: Callable[[T], T]) -> None:
        """Set the value to fn(current value)."""
        self.value = fn(self._value)

    def subscribe(self, listener: Callable[[T], None]) -> Callable[[], None]:
        """Call listener with the current value now and with every change.
        Returns a function that removes the listener."""
        self._listeners.append(listener)
        listener(self._value)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def as_state_flow(self) -> StateFlow[T]:
        return StateFlow(self)
