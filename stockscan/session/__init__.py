"""
==============================================================================
Session Package - Scan Session State Machine
==============================================================================

Sequences one scan-to-resolution cycle per scanning surface.

Modules:
--------
- machine: Pure (state, event) -> (state, effects) transitions
- runner: asyncio driver executing timers, resolution tasks and feedback
- feedback: Haptic pattern collaborator

==============================================================================
"""

from .feedback import FeedbackPattern, FeedbackSink, LoggingFeedback
from .machine import (
    NOT_FOUND_MESSAGE,
    SCAN_ERROR_MESSAGE,
    CancelPending,
    EmitFeedback,
    FocusGained,
    FocusLost,
    ResolutionCompleted,
    ScanAttempt,
    ScanReceived,
    ScheduleTimer,
    SessionPhase,
    SessionState,
    SessionTimings,
    StartResolution,
    Step,
    TimerElapsed,
    TimerKind,
    transition,
)
from .runner import ScanSession

__all__ = [
    "FeedbackPattern",
    "FeedbackSink",
    "LoggingFeedback",
    "NOT_FOUND_MESSAGE",
    "SCAN_ERROR_MESSAGE",
    "CancelPending",
    "EmitFeedback",
    "FocusGained",
    "FocusLost",
    "ResolutionCompleted",
    "ScanAttempt",
    "ScanReceived",
    "ScheduleTimer",
    "SessionPhase",
    "SessionState",
    "SessionTimings",
    "StartResolution",
    "Step",
    "TimerElapsed",
    "TimerKind",
    "transition",
    "ScanSession",
]
