"""
Fairness protocol errors.

Every error here is a protocol violation: it aborts the one operation that
raised it and leaves the session exactly as it was.
"""


class FairnessError(Exception):
    """Base fairness protocol error."""


class CommitmentExistsError(FairnessError):
    """A salt commitment already exists for this game."""


class UnknownGameError(FairnessError):
    """No session has been committed for this game."""


class InvalidSessionStateError(FairnessError):
    """Operation not valid in the session's current state."""


class RandomnessNotFulfilledError(FairnessError):
    """Reveal attempted before the random value was delivered."""


class SessionEndedError(FairnessError):
    """The session has already been revealed."""


class SaltMismatchError(FairnessError):
    """The revealed salt does not hash to the commitment."""


class InvalidPositionError(FairnessError):
    """A claimed deck position is outside the 52-card deck."""


class InvalidRevealError(FairnessError):
    """Malformed reveal payload."""
