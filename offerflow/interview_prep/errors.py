"""
Error taxonomy for the interview preparation core.

None of these are fatal to the process; each leaves the raising component in
its prior state or a well-defined safe state.
"""


class PrepError(Exception):
    """Base class for interview prep errors."""


class ValidationError(PrepError):
    """Required input missing; refused before any network call."""


class GatewayError(PrepError):
    """The AI service failed or returned nothing usable."""


class PermissionDeniedError(PrepError):
    """Camera or microphone access was refused or failed."""


class QuotaExceededError(PrepError):
    """All free mock interview attempts have been used."""

    def __init__(self, used: int, limit: int):
        super().__init__(f"Free mock interview quota exhausted ({used}/{limit})")
        self.used = used
        self.limit = limit


class InsufficientPointsError(PrepError):
    """The points balance cannot cover the requested debit."""

    def __init__(self, balance: int, cost: int):
        super().__init__(f"Insufficient points: balance {balance}, cost {cost}")
        self.balance = balance
        self.cost = cost


class SessionClosedError(PrepError):
    """The mock session lifecycle has been torn down."""
