"""Engine layer: the era transition state machine and its observer contract."""

from deeptime.engine.observer import NullTransitionObserver, TransitionObserver
from deeptime.engine.transition import EraTransitionStateMachine

__all__ = ["EraTransitionStateMachine", "NullTransitionObserver", "TransitionObserver"]
