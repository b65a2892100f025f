"""
Domain error taxonomy.

Services raise these; ``skilltrade.main`` renders them as
``{"kind": ..., "detail": ...}`` with the matching HTTP status.
"""


class SkillTradeError(Exception):
    kind = "error"
    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> dict:
        return {"kind": self.kind, "detail": self.detail}


class ValidationError(SkillTradeError):
    """Malformed or missing input."""
    kind = "validation_error"
    status_code = 400


class UnauthorizedError(SkillTradeError):
    """Caller is not allowed to act on the target entity."""
    kind = "unauthorized"
    status_code = 403


class NotFoundError(SkillTradeError):
    kind = "not_found"
    status_code = 404


class InvalidTransitionError(SkillTradeError):
    """Requested lifecycle edge is not in the allowed-edge table."""
    kind = "invalid_transition"
    status_code = 409


class ConflictError(SkillTradeError):
    """A concurrent change won the race, or a uniqueness rule was hit."""
    kind = "conflict"
    status_code = 409


class PreconditionFailedError(SkillTradeError):
    kind = "precondition_failed"
    status_code = 412
