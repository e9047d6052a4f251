"""Practice driver: baseline bots playing full hands against the engine."""

from .bots import BaselineBot, baseline_strategy
from .session import PracticeSession, PracticeSessionError, SessionSummary

__all__ = [
    "BaselineBot",
    "baseline_strategy",
    "PracticeSession",
    "PracticeSessionError",
    "SessionSummary",
]
