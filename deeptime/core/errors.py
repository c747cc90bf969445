"""Exception types surfaced by the transition core."""

from __future__ import annotations


class DeepTimeError(Exception):
    """Base class for all errors raised by the core."""


class TransitionInProgressError(DeepTimeError):
    """A transition was requested while another one is still running."""

    def __init__(self, target: str = "") -> None:
        super().__init__(f"Transition already in progress (requested: {target or '?'})")
        self.target = target


class TransitionCancelledError(DeepTimeError):
    """The pending transition was cancelled before completing."""

    def __init__(self, target: str = "") -> None:
        super().__init__(f"Transition to {target or '?'} cancelled")
        self.target = target


class CreatureLoadError(DeepTimeError):
    """The content layer failed to load creatures for an era.

    Never propagated to the transition caller; kept on the state machine
    for inspection.
    """

    def __init__(self, era: str, cause: BaseException) -> None:
        super().__init__(f"Failed to load creatures for {era}: {cause!r}")
        self.era = era
        self.cause = cause
