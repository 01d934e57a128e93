# g6pd_agent/errors.py
"""Error types raised along the safety-check path."""


class SafetyCheckError(Exception):
    """Base class for all safety-check errors."""


class InvalidInputError(SafetyCheckError):
    """The request carried no usable substance name."""


class TransportError(SafetyCheckError):
    """The remote completion model could not be reached or answered badly."""


class ParseError(SafetyCheckError):
    """The model's answer is not a valid verdict."""

    def __init__(self, message: str, raw: str):
        super().__init__(message)
        self.raw = raw
