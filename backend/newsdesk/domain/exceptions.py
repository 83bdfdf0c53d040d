class InvariantViolation(Exception):
    """A persisted article tree broke one of its structural rules."""


class IllegalTransition(ValueError):
    """Requested publication state change is not allowed."""


class UnsupportedMediaError(ValueError):
    """File refused by the media pipeline (type or size)."""


class TreeWriteError(RuntimeError):
    """A multi-step article tree write failed part way through."""


class ValidationFailure(Exception):
    """
    Carries a full field-keyed validation report.

    Raised by the application layer, never by the validator itself, so that
    every violation is collected before the request is rejected.
    """

    def __init__(self, report):
        super().__init__("Validation failed")
        self.report = report

    @classmethod
    def single(cls, field, message, code):
        from .validation import ValidationReport

        report = ValidationReport()
        report.add(field, message, code)
        return cls(report)
