#!/usr/bin/env python3
"""
Tests for Launch Scheduling

Tests cover:
1. Idle spawn period drawn within [min, max)
2. Idle spawns gated on framerate and the idle toggle
3. Fanfare cadence, re-entrancy guard and self-termination
4. Fanfare catch-up limit after a stalled loop
5. Reconfiguration keeps running state
"""

import random
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from fireworks.constants import FANFARE_MAX_CATCHUP
from fireworks.scheduler import FanfareBurst, IdleSpawnTimer, LaunchScheduler
from fireworks.settings import ShowSettings


# =============================================================================
# IDLE SPAWN TIMER
# =============================================================================

class TestIdleSpawnTimer:

    def test_period_always_within_range(self):
        timer = IdleSpawnTimer(2.0, 5.0, random.Random(11))
        for i in range(1000):
            timer.reset(float(i))
            assert 2.0 <= timer.current_period < 5.0
            assert timer.last_spawn_at == float(i)

    def test_due_only_after_period(self):
        timer = IdleSpawnTimer(2.0, 5.0, random.Random(0))
        timer.reset(0.0)
        period = timer.current_period
        assert not timer.is_due(period)
        assert timer.is_due(period + 1e-6)

    def test_unset_timer_is_due(self):
        assert IdleSpawnTimer(2.0, 5.0).is_due(0.0)


class TestIdleSpawnGate:

    @pytest.fixture
    def scheduler(self):
        scheduler = LaunchScheduler(ShowSettings(), random.Random(1))
        scheduler.note_launch(0.0)
        return scheduler

    @pytest.mark.parametrize("framerate", [None, 0.0, 10.0, 15.0])
    def test_never_fires_at_low_framerate(self, scheduler, framerate):
        assert not scheduler.idle_spawn_due(1000.0, framerate)

    def test_fires_above_tolerance_once_overdue(self, scheduler):
        assert not scheduler.idle_spawn_due(1.0, 60.0)
        assert scheduler.idle_spawn_due(10.0, 60.0)
        assert scheduler.idle_spawn_due(10.0, 15.1)

    def test_disabled_idle_launches(self):
        scheduler = LaunchScheduler(ShowSettings(idle_launches=False), random.Random(1))
        assert not scheduler.idle_spawn_due(1000.0, 60.0)

    def test_launch_resets_countdown(self, scheduler):
        assert scheduler.idle_spawn_due(10.0, 60.0)
        scheduler.note_launch(10.0)
        assert not scheduler.idle_spawn_due(11.0, 60.0)
        assert 2.0 <= scheduler.idle.current_period < 5.0


# =============================================================================
# FANFARE
# =============================================================================

def _run_burst(burst, start, fps, seconds):
    shots = 0
    frames = int(seconds * fps)
    for k in range(1, frames + 1):
        shots += burst.due_shots(start + k / fps)
    return shots


class TestFanfareBurst:

    def test_single_burst_at_a_time(self):
        burst = FanfareBurst(16.0, 4.0)
        assert burst.start(0.0) is True
        assert burst.start(0.01) is False
        assert burst.started_at == 0.0

    def test_cadence_and_self_termination(self):
        burst = FanfareBurst(16.0, 4.0)
        burst.start(0.0)
        # Slots every 1/16 s up to and including the one at 4 s
        assert _run_burst(burst, 0.0, 60, 6.0) == 64
        assert not burst.active

    def test_nothing_fires_before_first_slot(self):
        burst = FanfareBurst(16.0, 4.0)
        burst.start(5.0)
        assert burst.due_shots(5.05) == 0
        assert burst.due_shots(5.0625) == 1

    def test_no_shots_after_termination(self):
        burst = FanfareBurst(16.0, 4.0)
        burst.start(0.0)
        _run_burst(burst, 0.0, 60, 6.0)
        assert burst.due_shots(7.0) == 0
        assert burst.due_shots(100.0) == 0

    def test_restart_after_termination(self):
        burst = FanfareBurst(16.0, 4.0)
        burst.start(0.0)
        _run_burst(burst, 0.0, 60, 6.0)
        assert burst.start(10.0) is True

    def test_catch_up_is_capped(self):
        burst = FanfareBurst(16.0, 4.0)
        burst.start(0.0)
        assert burst.due_shots(2.0) == FANFARE_MAX_CATCHUP
        # Missed slots are dropped; the next one is a period after the stall
        assert burst.due_shots(2.0) == 0
        assert burst.due_shots(2.0625) == 1

    def test_stall_past_duration_ends_burst(self):
        burst = FanfareBurst(16.0, 4.0)
        burst.start(0.0)
        # Every slot was missed while stalled; none fire after the deadline
        assert burst.due_shots(10.0) == 0
        assert burst.due_shots(10.0625) == 0
        assert not burst.active

    def test_last_slot_fires_when_tick_is_slightly_late(self):
        burst = FanfareBurst(16.0, 4.0)
        burst.start(0.0)
        fired = sum(burst.due_shots(k / 16) for k in range(1, 64))
        assert fired == 63
        assert burst.due_shots(4.01) == 1
        assert not burst.active

    def test_no_slot_past_deadline(self):
        burst = FanfareBurst(16.0, 4.0)
        burst.start(0.0)
        burst.due_shots(3.99)
        # Realigned past the deadline; the burst ends without another shell
        assert burst.next_fire_at > 4.0
        assert burst.due_shots(4.0) == 0
        assert not burst.active


class TestLaunchSchedulerFanfare:

    def test_second_trigger_is_noop(self):
        scheduler = LaunchScheduler(ShowSettings(), random.Random(2))
        assert scheduler.start_fanfare(0.0) is True
        assert scheduler.start_fanfare(0.5) is False
        assert scheduler.fanfare_in_progress

    def test_show_settings_shape_the_burst(self):
        scheduler = LaunchScheduler(ShowSettings(fanfare_rate=8.0, fanfare_duration=1.0), random.Random(2))
        scheduler.start_fanfare(0.0)
        shots = sum(scheduler.fanfare_shots(k / 100) for k in range(1, 300))
        # Slots at 0.125 s steps up to 1 s
        assert shots == 8
        assert not scheduler.fanfare_in_progress

    def test_configure_keeps_running_fanfare(self):
        scheduler = LaunchScheduler(ShowSettings(), random.Random(2))
        scheduler.start_fanfare(0.0)
        burst = scheduler.fanfare
        scheduler.configure(ShowSettings(fanfare_rate=4.0))
        assert scheduler.fanfare is burst

    def test_configure_keeps_idle_countdown(self):
        scheduler = LaunchScheduler(ShowSettings(), random.Random(2))
        scheduler.note_launch(3.0)
        period = scheduler.idle.current_period
        scheduler.configure(ShowSettings(min_spawn_period=0.5, max_spawn_period=1.0))
        assert scheduler.idle.last_spawn_at == 3.0
        assert scheduler.idle.current_period == period
        assert scheduler.idle.max_period == 1.0

    def test_fresh_scheduler_has_unset_countdown_and_idle_burst(self):
        scheduler = LaunchScheduler(ShowSettings(fanfare_rate=4.0), random.Random(2))
        assert scheduler.idle.last_spawn_at is None
        assert scheduler.idle.current_period is None
        assert not scheduler.fanfare.active
        assert scheduler.fanfare.period == pytest.approx(0.25)
