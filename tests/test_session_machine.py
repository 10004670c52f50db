"""
==============================================================================
Scan Session State Machine Tests
==============================================================================

Pure transition tests: no event loop, no timers.

==============================================================================
"""

from stockscan.scanner import Resolution, ResolutionError, ResolutionStatus
from stockscan.session import (
    NOT_FOUND_MESSAGE,
    SCAN_ERROR_MESSAGE,
    CancelPending,
    EmitFeedback,
    FeedbackPattern,
    FocusGained,
    FocusLost,
    ResolutionCompleted,
    ScanReceived,
    ScheduleTimer,
    SessionPhase,
    SessionState,
    SessionTimings,
    StartResolution,
    TimerElapsed,
    TimerKind,
    transition,
)

from conftest import make_product


TIMINGS = SessionTimings(success_display=1.5, result_clear_delay=0.5, failure_display=2.0)


def found(sku: str = "SR1001") -> Resolution:
    return Resolution(status=ResolutionStatus.FOUND, candidate=sku, product=make_product("p-1", sku))


def not_found() -> Resolution:
    return Resolution(status=ResolutionStatus.NOT_FOUND, candidate="ZZZ999")


def locked_state() -> SessionState:
    return transition(SessionState(), ScanReceived(" SR1001|2500|50\r\n"), TIMINGS).state


class TestScanAccepted:
    """Tests for IDLE -> LOCKED."""
    
    def test_scan_locks_session(self):
        step = transition(SessionState(), ScanReceived(" SR1001|2500|50\r\n", "CODE128"), TIMINGS)
        
        assert step.state.phase == SessionPhase.LOCKED
        assert step.state.generation == 1
        assert step.state.attempt.raw_text == " SR1001|2500|50\r\n"
        assert step.state.attempt.normalized_text == "SR1001|2500|50"
        assert step.state.attempt.pending
    
    def test_scan_emits_accept_then_starts_resolution(self):
        step = transition(SessionState(), ScanReceived("SR1001"), TIMINGS)
        
        assert step.effects == (
            CancelPending(),
            EmitFeedback(FeedbackPattern.ACCEPT),
            StartResolution("SR1001", 1),
        )
    
    def test_scans_dropped_while_locked(self):
        state = locked_state()
        step = transition(state, ScanReceived("SR1001"), TIMINGS)
        
        assert step.state is state
        assert step.effects == ()
    
    def test_scans_dropped_during_success_and_failure(self):
        state = locked_state()
        success = transition(state, ResolutionCompleted(state.generation, found()), TIMINGS).state
        failure = transition(state, ResolutionCompleted(state.generation, not_found()), TIMINGS).state
        
        for current in (success, failure):
            step = transition(current, ScanReceived("SR1001"), TIMINGS)
            assert step.state is current
            assert step.effects == ()
    
    def test_scans_dropped_while_unfocused(self):
        state = transition(SessionState(), FocusLost(), TIMINGS).state
        step = transition(state, ScanReceived("SR1001"), TIMINGS)
        
        assert step.state.phase == SessionPhase.IDLE
        assert step.effects == ()


class TestResolution:
    """Tests for LOCKED -> SUCCESS / FAILURE."""
    
    def test_found_moves_to_success(self):
        state = locked_state()
        step = transition(state, ResolutionCompleted(state.generation, found()), TIMINGS)
        
        assert step.state.phase == SessionPhase.SUCCESS
        assert step.state.product.sku == "SR1001"
        assert step.state.message == "Found Product SR1001"
        assert step.effects == (
            EmitFeedback(FeedbackPattern.SUCCESS),
            ScheduleTimer(TimerKind.DISPLAY_ELAPSED, 1.5, state.generation),
            ScheduleTimer(TimerKind.CLEAR_RESULT, 2.0, state.generation),
        )
    
    def test_not_found_moves_to_failure(self):
        state = locked_state()
        step = transition(state, ResolutionCompleted(state.generation, not_found()), TIMINGS)
        
        assert step.state.phase == SessionPhase.FAILURE
        assert step.state.message == NOT_FOUND_MESSAGE
        assert step.effects == (
            EmitFeedback(FeedbackPattern.ERROR),
            ScheduleTimer(TimerKind.DISPLAY_ELAPSED, 2.0, state.generation),
        )
    
    def test_error_moves_to_failure_with_distinct_message(self):
        state = locked_state()
        error = Resolution.failed(ResolutionError.NETWORK_FAILURE, "timeout")
        step = transition(state, ResolutionCompleted(state.generation, error), TIMINGS)
        
        assert step.state.phase == SessionPhase.FAILURE
        assert step.state.message == SCAN_ERROR_MESSAGE
        assert EmitFeedback(FeedbackPattern.ERROR) in step.effects
    
    def test_stale_resolution_ignored(self):
        state = locked_state()
        step = transition(state, ResolutionCompleted(state.generation - 1, found()), TIMINGS)
        
        assert step.state is state
        assert step.effects == ()
    
    def test_resolution_after_teardown_ignored(self):
        state = locked_state()
        torn_down = transition(state, FocusLost(), TIMINGS).state
        step = transition(torn_down, ResolutionCompleted(state.generation, found()), TIMINGS)
        
        assert step.state is torn_down


class TestAutoReset:
    """Tests for timed return to IDLE."""
    
    def test_success_returns_to_idle_then_clears(self):
        state = locked_state()
        gen = state.generation
        state = transition(state, ResolutionCompleted(gen, found()), TIMINGS).state
        
        state = transition(state, TimerElapsed(TimerKind.DISPLAY_ELAPSED, gen), TIMINGS).state
        assert state.phase == SessionPhase.IDLE
        assert state.product is not None
        
        state = transition(state, TimerElapsed(TimerKind.CLEAR_RESULT, gen), TIMINGS).state
        assert state.phase == SessionPhase.IDLE
        assert state.attempt is None
        assert state.message is None
    
    def test_failure_returns_to_clean_idle(self):
        state = locked_state()
        gen = state.generation
        state = transition(state, ResolutionCompleted(gen, not_found()), TIMINGS).state
        state = transition(state, TimerElapsed(TimerKind.DISPLAY_ELAPSED, gen), TIMINGS).state
        
        assert state.phase == SessionPhase.IDLE
        assert state.attempt is None
        assert state.message is None
        assert state.accepting_scans
    
    def test_clear_timer_from_previous_cycle_is_ignored(self):
        state = locked_state()
        gen = state.generation
        state = transition(state, ResolutionCompleted(gen, found()), TIMINGS).state
        state = transition(state, TimerElapsed(TimerKind.DISPLAY_ELAPSED, gen), TIMINGS).state
        
        # New scan before the clear timer fires
        step = transition(state, ScanReceived("SR2002"), TIMINGS)
        assert CancelPending() in step.effects
        state = step.state
        
        step = transition(state, TimerElapsed(TimerKind.CLEAR_RESULT, gen), TIMINGS)
        assert step.state is state
        assert step.state.attempt.normalized_text == "SR2002"


class TestFocus:
    """Tests for reset on focus changes."""
    
    def test_focus_lost_from_failure_resets_and_cancels(self):
        state = locked_state()
        gen = state.generation
        state = transition(state, ResolutionCompleted(gen, not_found()), TIMINGS).state
        
        step = transition(state, FocusLost(), TIMINGS)
        assert step.state.phase == SessionPhase.IDLE
        assert step.state.message is None
        assert step.state.attempt is None
        assert step.state.generation == gen + 1
        assert step.effects == (CancelPending(),)
        
        # The old timer firing anyway must not resurrect anything
        late = transition(step.state, TimerElapsed(TimerKind.DISPLAY_ELAPSED, gen), TIMINGS)
        assert late.state is step.state
    
    def test_focus_regained_starts_clean(self):
        state = transition(locked_state(), FocusLost(), TIMINGS).state
        step = transition(state, FocusGained(), TIMINGS)
        
        assert step.state.phase == SessionPhase.IDLE
        assert step.state.active
        assert step.state.attempt is None
        assert step.state.accepting_scans
