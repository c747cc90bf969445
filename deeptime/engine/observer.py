"""The capability interface the transition state machine drives."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from deeptime.core.models import CreatureDescriptor, Era


class TransitionObserver(ABC):
    """Content/rendering-layer callbacks for an era transition.

    Every method is mandatory; use ``NullTransitionObserver`` when a layer
    has nothing to do.
    """

    @abstractmethod
    def on_slider_lock_change(self, locked: bool) -> None:
        """Disable (True) or re-enable (False) the time-navigation control."""

    @abstractmethod
    def on_transition_start(self, previous: Era | None, target: Era) -> None: ...

    @abstractmethod
    def on_transition_complete(self, target: Era) -> None: ...

    @abstractmethod
    def on_clear_content(self) -> None:
        """Fade-out finished: remove the current era's creatures."""

    @abstractmethod
    async def load_creatures(self, era: Era) -> list[CreatureDescriptor]:
        """Fetch the creatures for *era*.  May raise; failures are absorbed."""


class NullTransitionObserver(TransitionObserver):
    """Observer that ignores every notification and loads nothing."""

    def on_slider_lock_change(self, locked: bool) -> None:
        pass

    def on_transition_start(self, previous: Era | None, target: Era) -> None:
        pass

    def on_transition_complete(self, target: Era) -> None:
        pass

    def on_clear_content(self) -> None:
        pass

    async def load_creatures(self, era: Era) -> list[CreatureDescriptor]:
        return []
