"""Domain services for the reading tracker."""

from .achievement_engine import AchievementEngine, EvaluationResult
from .coalescing import CoalescingTrigger
from .session_timer import SessionTimer, TimerState

__all__ = [
    "AchievementEngine",
    "EvaluationResult",
    "CoalescingTrigger",
    "SessionTimer",
    "TimerState",
]
