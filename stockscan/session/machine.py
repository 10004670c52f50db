"""
==============================================================================
Scan Session State Machine
==============================================================================

Pure transition function for one scanning surface.

    IDLE --scan--> LOCKED --found--> SUCCESS --window--> IDLE
                          --not found / error--> FAILURE --window--> IDLE

transition(state, event, timings) returns the next state plus the list of
effects (feedback, resolution start, timers) for a driver to execute. It
performs no I/O, so the drop-while-locked and cancel-on-refocus rules can
be checked directly.

Generation:
-----------
Every accepted scan and every focus change increments the generation.
Resolution results and timers carry the generation they were started
under; anything older than the current generation is ignored.

==============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import NamedTuple, Optional, Tuple, Union

from stockscan.catalog import CatalogProduct
from stockscan.codec import ProductRef
from stockscan.scanner.normalizer import normalize
from stockscan.scanner.resolver import Resolution, ResolutionStatus

from .feedback import FeedbackPattern


NOT_FOUND_MESSAGE = "Product not found"
SCAN_ERROR_MESSAGE = "Scan error, try again"


class SessionPhase(str, Enum):
    IDLE = "idle"
    LOCKED = "locked"
    SUCCESS = "success"
    FAILURE = "failure"


class TimerKind(str, Enum):
    DISPLAY_ELAPSED = "display_elapsed"
    CLEAR_RESULT = "clear_result"


@dataclass(frozen=True)
class SessionTimings:
    """Display windows in seconds."""
    
    success_display: float = 1.5
    result_clear_delay: float = 0.5
    failure_display: float = 2.0


@dataclass(frozen=True)
class ScanAttempt:
    """
    Per-scan state, discarded when the session resets.
    
    resolution is None while the attempt is pending.
    """
    
    raw_text: str
    normalized_text: str
    parsed_payload: Optional[ProductRef] = None
    resolution: Optional[Resolution] = None
    
    @property
    def pending(self) -> bool:
        return self.resolution is None


@dataclass(frozen=True)
class SessionState:
    phase: SessionPhase = SessionPhase.IDLE
    generation: int = 0
    active: bool = True
    attempt: Optional[ScanAttempt] = None
    message: Optional[str] = None
    
    @property
    def product(self) -> Optional[CatalogProduct]:
        if self.attempt and self.attempt.resolution:
            return self.attempt.resolution.product
        return None
    
    @property
    def accepting_scans(self) -> bool:
        return self.active and self.phase == SessionPhase.IDLE
    
    def to_dict(self) -> dict:
        product = self.product
        return {
            "phase": self.phase.value,
            "generation": self.generation,
            "active": self.active,
            "message": self.message,
            "raw_text": self.attempt.raw_text if self.attempt else None,
            "normalized_text": self.attempt.normalized_text if self.attempt else None,
            "product": product.to_response() if product else None,
        }


# =============================================================================
# EVENTS
# =============================================================================

@dataclass(frozen=True)
class ScanReceived:
    raw_text: str
    symbology: str = ""


@dataclass(frozen=True)
class ResolutionCompleted:
    generation: int
    resolution: Resolution


@dataclass(frozen=True)
class TimerElapsed:
    kind: TimerKind
    generation: int


@dataclass(frozen=True)
class FocusGained:
    pass


@dataclass(frozen=True)
class FocusLost:
    pass


SessionEvent = Union[ScanReceived, ResolutionCompleted, TimerElapsed, FocusGained, FocusLost]


# =============================================================================
# EFFECTS
# =============================================================================

@dataclass(frozen=True)
class EmitFeedback:
    pattern: FeedbackPattern


@dataclass(frozen=True)
class StartResolution:
    candidate: str
    generation: int


@dataclass(frozen=True)
class ScheduleTimer:
    kind: TimerKind
    delay: float
    generation: int


@dataclass(frozen=True)
class CancelPending:
    """Cancel every pending timer and any in-flight resolution."""


Effect = Union[EmitFeedback, StartResolution, ScheduleTimer, CancelPending]


class Step(NamedTuple):
    state: SessionState
    effects: Tuple[Effect, ...] = ()


# =============================================================================
# TRANSITIONS
# =============================================================================

def transition(
    state: SessionState,
    event: SessionEvent,
    timings: SessionTimings = SessionTimings(),
) -> Step:
    """
    Compute the next session state and the effects to execute.
    
    Args:
        state: Current session state
        event: Incoming event
        timings: Display windows
        
    Returns:
        Step with the new state and effects; an ignored event returns the
        same state and no effects
    """
    if isinstance(event, ScanReceived):
        return _on_scan(state, event)
    if isinstance(event, ResolutionCompleted):
        return _on_resolution(state, event, timings)
    if isinstance(event, TimerElapsed):
        return _on_timer(state, event)
    if isinstance(event, FocusLost):
        return Step(SessionState(generation=state.generation + 1, active=False), (CancelPending(),))
    if isinstance(event, FocusGained):
        return Step(SessionState(generation=state.generation + 1, active=True), (CancelPending(),))
    
    raise TypeError(f"Unknown session event: {event!r}")


def _on_scan(state: SessionState, event: ScanReceived) -> Step:
    if not state.accepting_scans:
        return Step(state)
    
    generation = state.generation + 1
    attempt = ScanAttempt(raw_text=event.raw_text, normalized_text=normalize(event.raw_text))
    
    return Step(
        SessionState(
            phase=SessionPhase.LOCKED,
            generation=generation,
            active=True,
            attempt=attempt,
        ),
        (
            CancelPending(),
            EmitFeedback(FeedbackPattern.ACCEPT),
            StartResolution(attempt.normalized_text, generation),
        ),
    )


def _on_resolution(state: SessionState, event: ResolutionCompleted, timings: SessionTimings) -> Step:
    if event.generation != state.generation or state.phase != SessionPhase.LOCKED:
        return Step(state)
    
    resolution = event.resolution
    attempt = replace(state.attempt, parsed_payload=resolution.payload, resolution=resolution)
    
    if resolution.status == ResolutionStatus.FOUND:
        return Step(
            replace(
                state,
                phase=SessionPhase.SUCCESS,
                attempt=attempt,
                message=f"Found {resolution.product.name}",
            ),
            (
                EmitFeedback(FeedbackPattern.SUCCESS),
                ScheduleTimer(TimerKind.DISPLAY_ELAPSED, timings.success_display, state.generation),
                ScheduleTimer(
                    TimerKind.CLEAR_RESULT,
                    timings.success_display + timings.result_clear_delay,
                    state.generation,
                ),
            ),
        )
    
    message = NOT_FOUND_MESSAGE if resolution.status == ResolutionStatus.NOT_FOUND else SCAN_ERROR_MESSAGE
    return Step(
        replace(state, phase=SessionPhase.FAILURE, attempt=attempt, message=message),
        (
            EmitFeedback(FeedbackPattern.ERROR),
            ScheduleTimer(TimerKind.DISPLAY_ELAPSED, timings.failure_display, state.generation),
        ),
    )


def _on_timer(state: SessionState, event: TimerElapsed) -> Step:
    if event.generation != state.generation:
        return Step(state)
    
    if event.kind == TimerKind.DISPLAY_ELAPSED:
        if state.phase == SessionPhase.SUCCESS:
            # Product stays visible until CLEAR_RESULT so the consumer can navigate
            return Step(replace(state, phase=SessionPhase.IDLE))
        if state.phase == SessionPhase.FAILURE:
            return Step(replace(state, phase=SessionPhase.IDLE, attempt=None, message=None))
        return Step(state)
    
    if event.kind == TimerKind.CLEAR_RESULT and state.phase == SessionPhase.IDLE:
        return Step(replace(state, attempt=None, message=None))
    
    return Step(state)
