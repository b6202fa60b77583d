"""Tests for the leader guard and poll scheduler."""

import os
import threading

from trendwatch.monitor.leader_guard import LeaderGuard
from trendwatch.monitor.scheduler import PollScheduler


class TestLeaderGuard:
    """Tests for first-claim-wins leadership."""

    def test_first_claim_is_leader(self):
        """Test that the first worker becomes leader."""
        guard = LeaderGuard.claim(pid=100)

        assert guard.is_leader is True
        assert guard.leader_pid == 100
        assert guard.describe() == "PID 100"

    def test_later_claims_are_followers(self):
        """Test that workers after the first see the existing claim."""
        LeaderGuard.claim(pid=100)
        follower = LeaderGuard.claim(pid=200)

        assert follower.is_leader is False
        assert follower.leader_pid == 100
        assert follower.describe() == "follower"

    def test_defaults_to_current_pid(self):
        """Test that the process ID is used when none is given."""
        guard = LeaderGuard.claim()

        assert guard.pid == os.getpid()
        assert guard.is_leader is True

    def test_second_claim_in_same_process_is_follower(self):
        """Test that two workers sharing this process's PID get one leader."""
        first = LeaderGuard.claim()
        second = LeaderGuard.claim()

        assert first.is_leader is True
        assert second.is_leader is False
        assert second.pid == first.pid
        assert second.describe() == "follower"

    def test_reset(self):
        """Test that reset allows a new leader."""
        LeaderGuard.claim(pid=100)
        LeaderGuard.reset()

        assert LeaderGuard.claim(pid=200).is_leader is True

    def test_concurrent_claims_elect_one_leader(self):
        """Test that racing threads produce exactly one leader."""
        guards = []
        lock = threading.Lock()

        def claim(pid):
            guard = LeaderGuard.claim(pid=pid)
            with lock:
                guards.append(guard)

        threads = [threading.Thread(target=claim, args=(pid,)) for pid in range(1, 21)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sum(1 for g in guards if g.is_leader) == 1
        assert len({g.leader_pid for g in guards}) == 1


class TestPollScheduler:
    """Tests for the fixed-interval ticker."""

    def test_max_ticks(self):
        """Test that ticks are numbered and bounded."""
        scheduler = PollScheduler(interval_seconds=0)

        assert list(scheduler.ticks(max_ticks=3)) == [1, 2, 3]

    def test_pre_stopped(self):
        """Test that a stopped scheduler yields nothing."""
        stop_event = threading.Event()
        stop_event.set()

        assert list(PollScheduler(0, stop_event).ticks()) == []

    def test_stop_during_tick(self):
        """Test that stopping from inside a tick ends the schedule."""
        scheduler = PollScheduler(interval_seconds=60)
        ticks = []

        for tick in scheduler.ticks():
            ticks.append(tick)
            scheduler.stop()

        assert ticks == [1]
        assert scheduler.stopped is True
