"""
==============================================================================
Feedback Module
==============================================================================

Haptic / feedback collaborator for the scan session.

Patterns are fire-and-forget: the session never waits on a sink and a
failing sink never affects session state.

==============================================================================
"""

from __future__ import annotations

import logging
from enum import Enum


# Module logger
logger = logging.getLogger(__name__)


class FeedbackPattern(str, Enum):
    """Named vibration patterns."""
    
    ACCEPT = "accept"
    SUCCESS = "success"
    ERROR = "error"


class FeedbackSink:
    """Base class for feedback collaborators."""
    
    def emit(self, pattern: FeedbackPattern) -> None:
        raise NotImplementedError


class LoggingFeedback(FeedbackSink):
    """Feedback sink that only logs the pattern."""
    
    def emit(self, pattern: FeedbackPattern) -> None:
        logger.debug(f"📳 Feedback: {pattern.value}")
