"""
Observer interface and registry for match state changes.

Observers are held by weak reference: the match never keeps a UI or log
component alive. Delivery is synchronous and in registration order; an
observer must not call back into the match from inside a callback.
"""
import weakref
from typing import Callable, List


class GameObserver:
    """
    Base class for match observers.

    Every callback is a no-op so subclasses override only what they need.
    """

    def on_score_changed(self, new_score: int) -> None:
        pass

    def on_lives_changed(self, new_lives: int, total_lives: int) -> None:
        pass

    def on_turn_changed(self, player: int, player_name: str) -> None:
        pass

    def on_game_over(self, won: bool, winner: int) -> None:
        pass

    def on_cell_revealed(self, row: int, col: int, player: int) -> None:
        pass


class ObserverRegistry:
    """Ordered collection of weakly referenced observers."""

    def __init__(self) -> None:
        self._refs: List["weakref.ReferenceType[GameObserver]"] = []

    def add(self, observer: GameObserver) -> None:
        """Register an observer; duplicates and None are ignored."""
        if observer is None or observer in self:
            return
        self._refs.append(weakref.ref(observer))

    def remove(self, observer: GameObserver) -> None:
        """Unregister an observer if present."""
        self._refs = [
            ref for ref in self._refs
            if ref() is not None and ref() is not observer
        ]

    def __contains__(self, observer: object) -> bool:
        return any(ref() is observer for ref in self._refs)

    def __len__(self) -> int:
        return len(self.alive())

    def alive(self) -> List[GameObserver]:
        """Live observers in registration order; dead entries are dropped."""
        observers = []
        live_refs = []
        for ref in self._refs:
            observer = ref()
            if observer is not None:
                observers.append(observer)
                live_refs.append(ref)
        self._refs = live_refs
        return observers

    def notify(self, callback: Callable[[GameObserver], None]) -> None:
        """Invoke ``callback`` for each live observer, in order."""
        for observer in self.alive():
            callback(observer)
