"""Common enum types for the quality engine.

Rules:
    - StrEnum for every string-valued enum (serializes as its value)
    - Ordering is never derived from string comparison; ordered enums
      expose an explicit rank
"""

from enum import StrEnum


class QualityBadge(StrEnum):
    """Discrete quality tier derived from an overall score.

    Bands are closed at the bottom and open at the top, except Excellent
    which includes 100.

    Attributes:
        CRITICAL: [0, 25)
        POOR: [25, 50)
        FAIR: [50, 75)
        GOOD: [75, 90)
        EXCELLENT: [90, 100]
    """

    CRITICAL = "Critical"
    POOR = "Poor"
    FAIR = "Fair"
    GOOD = "Good"
    EXCELLENT = "Excellent"

    @property
    def lower_bound(self) -> float:
        """Inclusive lower bound of the band."""
        bounds = {
            QualityBadge.CRITICAL: 0.0,
            QualityBadge.POOR: 25.0,
            QualityBadge.FAIR: 50.0,
            QualityBadge.GOOD: 75.0,
            QualityBadge.EXCELLENT: 90.0,
        }
        return bounds[self]


class BenchmarkStatus(StrEnum):
    """Lifecycle of a benchmark session.

    Pending -> Running -> Completed | Failed. Pending may also fail
    directly. Completed and Failed are terminal.
    """

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """No transition leaves this status."""
        return self in (BenchmarkStatus.COMPLETED, BenchmarkStatus.FAILED)

    def can_transition_to(self, target: "BenchmarkStatus") -> bool:
        """Whether ``self -> target`` is a legal transition."""
        allowed = {
            BenchmarkStatus.PENDING: {BenchmarkStatus.RUNNING, BenchmarkStatus.FAILED},
            BenchmarkStatus.RUNNING: {BenchmarkStatus.COMPLETED, BenchmarkStatus.FAILED},
            BenchmarkStatus.COMPLETED: set(),
            BenchmarkStatus.FAILED: set(),
        }
        return target in allowed[self]


class Severity(StrEnum):
    """Security finding severity.

    Total order Info < Low < Medium < High < Critical via ``rank``.
    """

    INFO = "info"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Position in the severity order (Info=0 ... Critical=4)."""
        ranks = {
            Severity.INFO: 0,
            Severity.LOW: 1,
            Severity.MEDIUM: 2,
            Severity.HIGH: 3,
            Severity.CRITICAL: 4,
        }
        return ranks[self]

    @property
    def weight(self) -> float:
        """Weight of a checklist item of this severity in audit scoring."""
        weights = {
            Severity.INFO: 0.5,
            Severity.LOW: 1.0,
            Severity.MEDIUM: 3.0,
            Severity.HIGH: 5.0,
            Severity.CRITICAL: 10.0,
        }
        return weights[self]


class CheckCategory(StrEnum):
    """Category of a security checklist item."""

    INPUT_VALIDATION = "input_validation"
    STATE_MANAGEMENT = "state_management"
    ACCESS_CONTROL = "access_control"
    REENTRANCY = "reentrancy"
    NUMERICAL_SAFETY = "numerical_safety"
    AUTHENTICATION_AUTHORIZATION = "authentication_authorization"
    DATA_SERIALIZATION = "data_serialization"
    ERROR_HANDLING = "error_handling"
    STORAGE_PATTERNS = "storage_patterns"
    TOKEN_SAFETY = "token_safety"
    EVENT_LOGGING = "event_logging"
    UPGRADEABILITY = "upgradeability"
    CROSS_CONTRACT_CALLS = "cross_contract_calls"
    RESOURCE_LIMITS = "resource_limits"

    @property
    def label(self) -> str:
        """Human-readable category name."""
        special = {
            CheckCategory.AUTHENTICATION_AUTHORIZATION: "Authentication & Authorization",
            CheckCategory.CROSS_CONTRACT_CALLS: "Cross-Contract Calls",
        }
        return special.get(self, self.value.replace("_", " ").title())


class CheckStatus(StrEnum):
    """Status of one checklist item within an audit."""

    PASSED = "passed"
    FAILED = "failed"
    NOT_APPLICABLE = "not_applicable"
    PENDING = "pending"
