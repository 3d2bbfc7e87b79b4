"""
Tests de la machine à états de lecture (`PlaybackSession`).
"""
import math

import pytest

from training.progress import (
    COMPLETED, DURATION_UPDATE, ENDED, HALF, IDLE, PAUSED, PLAYING, STARTED, THREE_QUARTERS,
    MilestoneEvent, PlaybackSession,
)

EMAIL = 'rep@example.com'


def milestones(events):
    return [event.milestone for event in events]


@pytest.fixture
def reported():
    return []


@pytest.fixture
def session(reported):
    return PlaybackSession(EMAIL, report=reported.append)


class TestStart:
    def test_first_play_emits_started_once(self, session):
        events = session.play(0)
        assert events == [MilestoneEvent(EMAIL, STARTED)]
        assert session.state == PLAYING

    def test_play_after_pause_does_not_re_emit_started(self, session):
        session.play(0)
        session.pause()
        assert session.play(4) == []
        assert session.state == PLAYING

    def test_report_called_for_each_emission(self, session, reported):
        session.play(0)
        assert milestones(reported) == [STARTED]


class TestAccumulation:
    def test_small_deltas_are_accumulated(self, session):
        session.play(0)
        for t in (0.25, 0.5, 0.75, 1.0, 1.25):
            session.timeupdate(t, 100)
        assert session.accumulated_watch_seconds == pytest.approx(1.25)

    def test_seek_forward_adds_nothing(self, session):
        session.play(0)
        session.timeupdate(1.0, 100)
        session.timeupdate(60.0, 100)
        assert session.accumulated_watch_seconds == pytest.approx(1.0)
        assert session.last_observed_timestamp == 60.0

    def test_seek_backward_adds_nothing(self, session):
        session.play(0)
        session.timeupdate(1.5, 100)
        session.timeupdate(0.5, 100)
        assert session.accumulated_watch_seconds == pytest.approx(1.5)
        assert session.last_observed_timestamp == 0.5

    def test_delta_equal_to_threshold_counts(self, session):
        session.play(10)
        session.timeupdate(12, 100)
        assert session.accumulated_watch_seconds == pytest.approx(2.0)

    def test_accumulation_is_never_negative(self, session):
        session.play(50)
        for t in (49, 20, 10, 60, 5):
            session.timeupdate(t, 100)
            assert session.accumulated_watch_seconds >= 0

    def test_accumulation_never_exceeds_wall_clock(self, session):
        # 10 secondes réelles à 4 mises à jour par seconde, avec deux sauts
        session.play(0)
        t = 0.0
        for i in range(40):
            t += 0.25
            if i in (10, 30):
                t += 30
            session.timeupdate(t, 300)
        assert session.accumulated_watch_seconds <= 10.0 + 1e-9

    def test_timeupdate_while_paused_is_not_counted(self, session):
        session.play(0)
        session.timeupdate(1, 100)
        session.pause()
        session.timeupdate(1.5, 100)
        session.timeupdate(2.0, 100)
        assert session.accumulated_watch_seconds == pytest.approx(1.0)
        assert session.last_observed_timestamp is None

    def test_resume_after_pause_restarts_from_play_position(self, session):
        session.play(0)
        session.timeupdate(1, 100)
        session.pause()
        session.play(40)
        session.timeupdate(41, 100)
        assert session.accumulated_watch_seconds == pytest.approx(2.0)

    def test_non_finite_current_time_is_ignored(self, session):
        session.play(0)
        assert session.timeupdate(math.nan, 100) == []
        assert session.last_observed_timestamp == 0


class TestPercentMilestones:
    def test_crossing_half_emits_once_with_accumulated_seconds(self, session):
        session.play(48)
        session.timeupdate(49, 100)
        events = session.timeupdate(50, 100)
        assert events == [MilestoneEvent(EMAIL, HALF, 50, pytest.approx(2.0))]

    def test_seek_to_eighty_percent_emits_half_then_three_quarters(self, session):
        session.play(0)
        events = session.timeupdate(80, 100)
        assert milestones(events) == [HALF, THREE_QUARTERS]
        assert [e.percentage for e in events] == [50, 75]

    def test_repeated_updates_emit_each_milestone_once(self, session, reported):
        session.play(0)
        for _ in range(10):
            session.timeupdate(80, 100)
        assert milestones(reported).count(HALF) == 1
        assert milestones(reported).count(THREE_QUARTERS) == 1

    def test_percentage_is_floored(self, session):
        session.play(0)
        assert session.timeupdate(49.99, 100) == []

    @pytest.mark.parametrize('duration', [None, 0, math.nan, math.inf])
    def test_unusable_duration_skips_percentages_but_keeps_accumulating(self, session, duration):
        session.play(0)
        session.timeupdate(1, duration)
        assert session.timeupdate(1.5, duration) == []
        assert session.accumulated_watch_seconds == pytest.approx(1.5)

    def test_paused_seek_still_checks_percentages(self, session):
        session.play(0)
        session.pause()
        assert milestones(session.timeupdate(60, 100)) == [HALF]


class TestPauseSync:
    def test_pause_emits_duration_update_with_accumulated_seconds(self, session):
        session.play(0)
        session.timeupdate(1, 100)
        events = session.pause()
        assert events == [MilestoneEvent(EMAIL, DURATION_UPDATE, watched_seconds=pytest.approx(1.0))]
        assert session.state == PAUSED

    def test_duration_update_is_emitted_on_every_pause(self, session, reported):
        session.play(0)
        session.timeupdate(1, 100)
        session.pause()
        session.play(1)
        session.timeupdate(2, 100)
        session.pause()
        assert milestones(reported).count(DURATION_UPDATE) == 2
        assert reported[-1].watched_seconds == pytest.approx(2.0)

    def test_pause_without_watched_time_emits_nothing(self, session):
        session.play(0)
        assert session.pause() == []
        assert session.state == PAUSED

    def test_pause_from_idle_is_ignored(self, session):
        assert session.pause() == []
        assert session.state == IDLE


class TestCompletion:
    def test_ended_after_three_quarters_emits_completed_only(self, session, reported):
        session.play(0)
        session.timeupdate(80, 100)
        events = session.ended()
        assert events == [MilestoneEvent(EMAIL, COMPLETED, 100, 0.0)]
        assert milestones(reported) == [STARTED, HALF, THREE_QUARTERS, COMPLETED]
        assert session.state == ENDED

    def test_ended_from_paused(self, session):
        session.play(0)
        session.pause()
        assert milestones(session.ended()) == [COMPLETED]

    def test_ended_from_idle_is_ignored(self, session):
        assert session.ended() == []
        assert session.state == IDLE

    def test_completed_is_terminal(self, session):
        session.play(0)
        session.ended()
        assert session.play(0) == []
        assert session.timeupdate(90, 100) == []
        assert session.pause() == []
        assert session.ended() == []
        assert session.state == ENDED


class TestRobustness:
    def test_failing_report_does_not_break_playback(self):
        def explode(event):
            raise RuntimeError('network down')

        session = PlaybackSession(EMAIL, report=explode)
        assert milestones(session.play(0)) == [STARTED]
        assert STARTED in session.tracked_milestones
        assert session.state == PLAYING

    def test_handle_dispatches_raw_events(self, session):
        assert milestones(session.handle('play', 0, 100)) == [STARTED]
        assert milestones(session.handle('timeupdate', 55, 100)) == [HALF]
        assert session.handle('pause', 55, 100) == []
        assert milestones(session.handle('ended', 100, 100)) == [COMPLETED]

    def test_handle_rejects_unknown_event(self, session):
        with pytest.raises(ValueError):
            session.handle('seeking', 3, 100)

    def test_state_survives_serialisation(self, session):
        session.play(0)
        session.timeupdate(1, 100)
        session.timeupdate(60, 100)

        restored = PlaybackSession.from_dict(session.to_dict())
        assert restored.email == EMAIL
        assert restored.state == PLAYING
        assert restored.tracked_milestones == {STARTED, HALF}
        assert restored.accumulated_watch_seconds == pytest.approx(1.0)
        assert restored.last_observed_timestamp == 60
        # Pas de ré-émission après restauration
        assert milestones(restored.timeupdate(61, 100)) == []


def test_payload_uses_wire_field_names():
    event = MilestoneEvent(EMAIL, HALF, 50, 12.5)
    assert event.as_payload() == {'email': EMAIL, 'milestone': HALF, 'percentage': 50, 'watchedSeconds': 12.5}
    assert MilestoneEvent(EMAIL, STARTED).as_payload() == {'email': EMAIL, 'milestone': STARTED}
