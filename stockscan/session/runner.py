"""
==============================================================================
Scan Session Driver
==============================================================================

Runs the pure state machine on an asyncio event loop.

The driver owns the side effects the machine asks for:
- Feedback patterns are sent to the feedback sink
- Resolutions run as a cancellable asyncio Task
- Auto-reset timers are loop.call_later handles

All of them are tagged with the session generation, so a result or timer
that outlives a reset is ignored by the machine even if cancellation
races with it.

Usage:
------
    session = ScanSession(ProductResolver(client), LoggingFeedback())
    session.scan("SR1001|2500|50")   # IDLE -> LOCKED
    session.scan("SR1001|2500|50")   # dropped, already locked
    session.blur()                   # back to IDLE, timers cancelled

==============================================================================
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Dict, Optional

from stockscan.scanner.resolver import Resolution, ResolutionError

from .feedback import FeedbackSink, LoggingFeedback
from .machine import (
    CancelPending,
    EmitFeedback,
    FocusGained,
    FocusLost,
    ResolutionCompleted,
    ScanReceived,
    ScheduleTimer,
    SessionEvent,
    SessionPhase,
    SessionState,
    SessionTimings,
    StartResolution,
    TimerElapsed,
    TimerKind,
    transition,
)


# Module logger
logger = logging.getLogger(__name__)


class ScanSession:
    """
    One scan session per scanning surface.
    
    Must be driven from a running event loop. Nothing is shared between
    sessions.
    
    Attributes:
        state: Current immutable SessionState
        pending_timers: Live timer handles by kind
    
    Example:
        >>> session = ScanSession(resolver, feedback, on_change=print)
        >>> session.scan(" SR1001 ")
        True
    """
    
    def __init__(
        self,
        resolver,
        feedback: Optional[FeedbackSink] = None,
        timings: Optional[SessionTimings] = None,
        on_change: Optional[Callable[[SessionState], None]] = None,
    ) -> None:
        """
        Initialize a session in a clean, focused IDLE state.
        
        Args:
            resolver: Object with async resolve(normalized_text) -> Resolution
            feedback: Haptic/feedback collaborator
            timings: Display windows
            on_change: Called with the new state after every change
        """
        self._resolver = resolver
        self._feedback = feedback or LoggingFeedback()
        self._timings = timings or SessionTimings()
        self._on_change = on_change
        self._state = SessionState()
        self._timers: Dict[TimerKind, asyncio.TimerHandle] = {}
        self._task: Optional[asyncio.Task] = None
    
    # =========================================================================
    # PROPERTIES
    # =========================================================================
    
    @property
    def state(self) -> SessionState:
        return self._state
    
    @property
    def phase(self) -> SessionPhase:
        return self._state.phase
    
    @property
    def pending_timers(self) -> Dict[TimerKind, asyncio.TimerHandle]:
        return dict(self._timers)
    
    @property
    def resolution_task(self) -> Optional[asyncio.Task]:
        return self._task
    
    # =========================================================================
    # SURFACE EVENTS
    # =========================================================================
    
    def scan(self, raw_text: str, symbology: str = "") -> bool:
        """
        Deliver a scan event from the optical scanner.
        
        Returns:
            True if the scan started a resolution, False if it was dropped
        """
        before = self._state.generation
        self.dispatch(ScanReceived(raw_text, symbology))
        
        accepted = self._state.phase == SessionPhase.LOCKED and self._state.generation != before
        if not accepted:
            logger.debug(f"Scan dropped in {self._state.phase.value}: {raw_text!r}")
        return accepted
    
    def focus(self) -> None:
        """Scanning surface gained focus: start from a clean IDLE."""
        self.dispatch(FocusGained())
    
    def blur(self) -> None:
        """Scanning surface lost focus: reset and cancel pending work."""
        self.dispatch(FocusLost())
    
    def close(self) -> None:
        """Tear the session down."""
        self.blur()
        logger.debug("Scan session closed")
    
    async def wait_resolved(self) -> None:
        """Wait for the in-flight resolution, if any, to be applied."""
        task = self._task
        if task is not None and not task.done():
            await asyncio.wait({task})
    
    # =========================================================================
    # DISPATCH
    # =========================================================================
    
    def dispatch(self, event: SessionEvent) -> SessionState:
        """Apply one event and execute the resulting effects."""
        previous = self._state
        step = transition(previous, event, self._timings)
        self._state = step.state
        
        for effect in step.effects:
            self._execute(effect)
        
        if step.state != previous:
            logger.debug(
                f"Session {previous.phase.value} → {step.state.phase.value} "
                f"(generation {step.state.generation})"
            )
            if self._on_change is not None:
                self._on_change(step.state)
        
        return self._state
    
    def _execute(self, effect) -> None:
        if isinstance(effect, CancelPending):
            self._cancel_pending()
        elif isinstance(effect, EmitFeedback):
            self._emit(effect)
        elif isinstance(effect, StartResolution):
            self._task = asyncio.get_running_loop().create_task(
                self._resolve(effect.candidate, effect.generation)
            )
        elif isinstance(effect, ScheduleTimer):
            self._schedule(effect)
        else:
            raise TypeError(f"Unknown session effect: {effect!r}")
    
    def _emit(self, effect: EmitFeedback) -> None:
        try:
            self._feedback.emit(effect.pattern)
        except Exception as e:
            logger.error(f"Feedback sink failed for {effect.pattern.value}: {e}")
    
    def _schedule(self, effect: ScheduleTimer) -> None:
        existing = self._timers.pop(effect.kind, None)
        if existing is not None:
            existing.cancel()
        
        self._timers[effect.kind] = asyncio.get_running_loop().call_later(
            effect.delay,
            self._on_timer,
            effect.kind,
            effect.generation,
        )
    
    def _on_timer(self, kind: TimerKind, generation: int) -> None:
        self._timers.pop(kind, None)
        self.dispatch(TimerElapsed(kind, generation))
    
    def _cancel_pending(self) -> None:
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()
        
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
    
    async def _resolve(self, candidate: str, generation: int) -> None:
        try:
            resolution = await self._resolver.resolve(candidate)
        except Exception as e:
            logger.exception(f"Resolver failed for {candidate!r}: {e}")
            resolution = Resolution.failed(ResolutionError.INTERNAL, str(e))
        
        if generation != self._state.generation:
            logger.debug(f"Discarding stale resolution (generation {generation})")
            return
        
        self.dispatch(ResolutionCompleted(generation, resolution))
