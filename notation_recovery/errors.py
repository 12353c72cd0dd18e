"""Error taxonomy for the notation recovery pipeline.

Only ``MalformedInput`` and ``CollaboratorFailure`` ever escape a component;
the orchestrator turns both into a rejected outcome. ``IllegalMove`` is raised
by the oracle when a token cannot be applied and is handled by the replayer.
"""


class NotationError(Exception):
    """Base class for every error raised by this package."""

    kind = "notation_error"


class MalformedInput(NotationError):
    """Raw input is empty or contains nothing that looks like notation."""

    kind = "malformed_input"


class IllegalMove(NotationError):
    """A plausible token that the rules engine refuses in the current position."""

    kind = "illegal_move"

    def __init__(self, token: str, reason: str = ""):
        self.token = token
        self.reason = reason
        super().__init__(f"{token!r}: {reason}" if reason else repr(token))


class CollaboratorFailure(NotationError):
    """The recognition engine or the vision fallback is unavailable or returned junk."""

    kind = "collaborator_failure"
