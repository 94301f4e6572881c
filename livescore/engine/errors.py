"""
Scoring errors. Every rejection leaves persisted state untouched.
"""


class ScoringError(Exception):
    """Base class for rejected scoring calls"""
    status_code = 400
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ScoringError):
    """Missing field, bad enum value or malformed outcome"""
    status_code = 400


class InvalidOutcome(ValidationError):
    pass


class NextBatsmanRequired(ValidationError):
    pass


class InvalidDismissalType(ValidationError):
    pass


class FielderCreditMismatch(ValidationError):
    pass


class FielderRequired(ValidationError):
    pass


class InvalidStrikeRole(ValidationError):
    pass


class RosterError(ValidationError):
    """Player is not eligible for the role they were submitted in"""
    pass


class NotFoundError(ScoringError):
    status_code = 404


class InningsAlreadyCompleted(ScoringError):
    status_code = 409


class MatchStateError(ScoringError):
    """Match is not in a state that accepts this operation"""
    status_code = 409


class TransactionConflict(ScoringError):
    status_code = 409
    retryable = True
