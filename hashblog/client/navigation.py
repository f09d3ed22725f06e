import logging
from typing import Callable, List, Protocol

logger = logging.getLogger(__name__)

FragmentListener = Callable[[str], None]


class NavigationAdapter(Protocol):
    """Access to the address bar: read, push, and listen for changes."""

    def current_fragment(self) -> str: ...

    def push(self, fragment: str) -> None: ...

    def subscribe(self, listener: FragmentListener) -> Callable[[], None]: ...


def _with_hash(fragment: str) -> str:
    fragment = fragment or ""
    if not fragment or fragment.startswith("#"):
        return fragment
    return f"#{fragment}"


class MemoryNavigation:
    """
    In-memory history stack behaving like the browser's hash history:
    pushing the current fragment again is a no-op, pushing a new one drops
    any forward entries, and every fragment change notifies subscribers.
    """

    def __init__(self, initial: str = ""):
        self._entries: List[str] = [_with_hash(initial)]
        self._index = 0
        self._listeners: List[FragmentListener] = []

    def current_fragment(self) -> str:
        return self._entries[self._index]

    @property
    def history(self) -> List[str]:
        return list(self._entries)

    def push(self, fragment: str) -> None:
        fragment = _with_hash(fragment)
        if fragment == self.current_fragment():
            return
        del self._entries[self._index + 1 :]
        self._entries.append(fragment)
        self._index += 1
        self._notify()

    def replace(self, fragment: str) -> None:
        fragment = _with_hash(fragment)
        if fragment == self.current_fragment():
            return
        self._entries[self._index] = fragment
        self._notify()

    def back(self) -> bool:
        if self._index == 0:
            return False
        self._move(-1)
        return True

    def forward(self) -> bool:
        if self._index >= len(self._entries) - 1:
            return False
        self._move(1)
        return True

    def subscribe(self, listener: FragmentListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _move(self, step: int) -> None:
        previous = self.current_fragment()
        self._index += step
        if self.current_fragment() != previous:
            self._notify()

    def _notify(self) -> None:
        fragment = self.current_fragment()
        logger.debug(f"Navigated to {fragment!r}")
        for listener in list(self._listeners):
            listener(fragment)
