# lending/config.py
import os
from dataclasses import dataclass
from decimal import Decimal

DEFAULT_GRACE_DAYS = 7          # Days a loan may run before it is overdue
DEFAULT_BORROW_LIMIT = 3        # Open loans a student may hold at once
DEFAULT_SUSPENSION_THRESHOLD = Decimal("50")
DEFAULT_LOCK_TIMEOUT = 5.0      # Seconds to wait for a row or database lock

@dataclass(frozen=True)
class LendingSettings:
    grace_days: int = DEFAULT_GRACE_DAYS
    borrow_limit: int = DEFAULT_BORROW_LIMIT
    suspension_threshold: Decimal = DEFAULT_SUSPENSION_THRESHOLD
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT

    def __post_init__(self):
        if self.grace_days < 0:
            raise ValueError(f"grace_days must be >= 0, got {self.grace_days}")
        if self.borrow_limit < 1:
            raise ValueError(f"borrow_limit must be >= 1, got {self.borrow_limit}")
        if self.lock_timeout <= 0:
            raise ValueError(f"lock_timeout must be > 0, got {self.lock_timeout}")

    @classmethod
    def from_env(cls) -> "LendingSettings":
        """Build settings from LENDING_* environment variables, falling back to defaults"""
        return cls(
            grace_days=int(os.getenv("LENDING_GRACE_DAYS", DEFAULT_GRACE_DAYS)),
            borrow_limit=int(os.getenv("LENDING_BORROW_LIMIT", DEFAULT_BORROW_LIMIT)),
            suspension_threshold=Decimal(os.getenv("LENDING_SUSPENSION_THRESHOLD", str(DEFAULT_SUSPENSION_THRESHOLD))),
            lock_timeout=float(os.getenv("LENDING_LOCK_TIMEOUT", DEFAULT_LOCK_TIMEOUT)),
        )
