"""Single-writer guard for workers sharing one interpreter's memory."""

import logging
import os
import threading
from typing import Optional

logger = logging.getLogger(__name__)


class LeaderGuard:
    """Decides whether this worker runs the trend monitor.

    The first claim stores the leader PID in class-level state; every later
    claim in the same process becomes a follower that serves reads only.
    This is a local single-writer assertion. It has no fencing and no
    liveness detection, and separate processes or hosts do not see each
    other's claims.
    """

    _leader_pid: Optional[int] = None
    _lock = threading.Lock()

    def __init__(self, pid: int, leader_pid: int, is_leader: bool):
        self.pid = pid
        self.leader_pid = leader_pid
        self.is_leader = is_leader

    @classmethod
    def claim(cls, pid: Optional[int] = None) -> "LeaderGuard":
        """Claim leadership, or join as a follower if already claimed.

        Leadership is decided here, not by comparing PIDs, so workers that
        share a PID still get exactly one leader.

        Args:
            pid: Worker identifier (default: current process ID)
        """
        pid = os.getpid() if pid is None else pid
        with cls._lock:
            is_leader = cls._leader_pid is None
            if is_leader:
                cls._leader_pid = pid
                logger.info(f"👑 PID {pid} claimed leadership")
            else:
                logger.info(f"👤 PID {pid} is a follower of PID {cls._leader_pid}, dashboard only")
            return cls(pid=pid, leader_pid=cls._leader_pid, is_leader=is_leader)

    @classmethod
    def reset(cls) -> None:
        """Reset shared state (useful for testing)."""
        with cls._lock:
            cls._leader_pid = None

    def describe(self) -> str:
        return f"PID {self.pid}" if self.is_leader else "follower"
