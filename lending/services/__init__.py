from .audit import AuditRecorder, snapshot
from .penalty import PenaltyEngine
from .validation import ValidationGate
from .borrow import BorrowCoordinator
from .returns import ReturnCoordinator, ReturnResult
from .records import RecordAdministration
from .sweepers import (
    SuspensionSweeper, SuspensionResult,
    NotificationSweeper, NotificationResult,
    OverdueMarker
)
from .reports import LendingReports, HistoryLine, AvailabilityLine, AvailabilityReport
from .desk import LendingDesk

__all__ = [
    'AuditRecorder',
    'snapshot',
    'PenaltyEngine',
    'ValidationGate',
    'BorrowCoordinator',
    'ReturnCoordinator',
    'ReturnResult',
    'RecordAdministration',
    'SuspensionSweeper',
    'SuspensionResult',
    'NotificationSweeper',
    'NotificationResult',
    'OverdueMarker',
    'LendingReports',
    'HistoryLine',
    'AvailabilityLine',
    'AvailabilityReport',
    'LendingDesk'
]
