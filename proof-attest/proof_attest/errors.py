from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    USER = "user"
    CONFIG = "config"
    IO = "io"
    TEMPLATE = "template"
    INTERNAL = "internal"


class AttestError(Exception):
    """Base class for every failure raised by proof_attest."""
    kind = ErrorKind.INTERNAL


class ConfigError(AttestError):
    kind = ErrorKind.CONFIG


class AttestIOError(AttestError):
    kind = ErrorKind.IO

    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path


class TemplateNotFoundError(AttestIOError):
    # the only failure a user fixes by changing their input
    kind = ErrorKind.USER


class TemplateError(AttestError):
    kind = ErrorKind.TEMPLATE

    def __init__(self, message: str, lineno: Optional[int] = None):
        super().__init__(message)
        self.lineno = lineno


class InternalError(AttestError):
    kind = ErrorKind.INTERNAL

    def __init__(self, message: str, stage: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.stage = stage
        self.cause_kind = cause.kind if isinstance(cause, AttestError) else ErrorKind.INTERNAL
