# core/response.py

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    # === Missing Entities ===

    # course, student, or instructor lookup came back empty
    NOT_FOUND = "NOT_FOUND"

    # === Constraint Violations ===

    # a course, student, or instructor with the same id is already stored
    ALREADY_EXISTS = "ALREADY_EXISTS"

    # === Validation Failures ===

    # required argument or attribute is missing
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"

    # input structure is malformed or incomplete
    INVALID_INPUT = "INVALID_INPUT"

    # field value is out of bounds or incorrectly formatted
    INVALID_FIELD_VALUE = "INVALID_FIELD_VALUE"

    # the value is valid in isolation, but violates roster rules
    VALIDATION_FAILED = "VALIDATION_FAILED"

    # === Internal Faults ===
    INTERNAL_ERROR = "INTERNAL_ERROR"
    LOGIC_ERROR = "LOGIC_ERROR"


# failures not listed here report 400
ERROR_STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.ALREADY_EXISTS: 409,
    ErrorCode.INTERNAL_ERROR: 500,
    ErrorCode.LOGIC_ERROR: 500,
}


class Response:
    """
    Result of a registry or course logic operation.

    Expected failures (an unknown course, a duplicate enrollment, a malformed data file) come back
    as a failed Response instead of an exception, so callers branch on `success` and `error`.

    Attributes:
        success (bool): Whether the operation succeeded.
        detail (str | None): Human-readable explanation, mostly set on failure.
        error (ErrorCode | str | None): Machine-readable reason for a failure.
        status_code (int | None): HTTP-style code; 200 on success, derived from `error` on failure.
        data (dict): Operation-specific payload, empty when there is none.
        trace (str | None): Exception traceback, if one was captured.
    """

    def __init__(
        self,
        success: bool,
        detail: str | None = None,
        error: ErrorCode | str | None = None,
        status_code: int | None = None,
        data: dict | None = None,
        trace: str | None = None,
    ):
        self._success = success
        self._detail = detail
        self._error = error
        self._status_code = status_code
        self._data = data or {}
        self._trace = trace

    # === properties ===

    @property
    def success(self) -> bool:
        return self._success

    @property
    def detail(self) -> str | None:
        return self._detail

    @property
    def error(self) -> ErrorCode | str | None:
        return self._error

    @property
    def status_code(self) -> int | None:
        return self._status_code

    @property
    def data(self) -> dict:
        return self._data

    @property
    def trace(self) -> str | None:
        return self._trace

    @property
    def is_not_found(self) -> bool:
        return self._error is ErrorCode.NOT_FOUND

    # === constructors ===

    @classmethod
    def succeed(
        cls,
        detail: str | None = None,
        data: dict | None = None,
        status_code: int = 200,
    ) -> Response:
        return cls(True, detail=detail, status_code=status_code, data=data)

    @classmethod
    def fail(
        cls,
        detail: str | None = None,
        error: ErrorCode | str | None = None,
        status_code: int | None = None,
        data: dict | None = None,
        trace: str | None = None,
    ) -> Response:
        """
        Builds a failed Response.

        When `status_code` is omitted it is looked up from `error` in `ERROR_STATUS_CODES`,
        falling back to 400.
        """
        if status_code is None:
            status_code = (
                ERROR_STATUS_CODES.get(error, 400) if isinstance(error, ErrorCode) else 400
            )

        return cls(
            False,
            detail=detail,
            error=error,
            status_code=status_code,
            data=data,
            trace=trace,
        )

    @classmethod
    def not_found(cls, detail: str) -> Response:
        return cls.fail(detail=detail, error=ErrorCode.NOT_FOUND)

    @classmethod
    def already_exists(cls, detail: str) -> Response:
        return cls.fail(detail=detail, error=ErrorCode.ALREADY_EXISTS)

    # === serialization ===

    def to_dict(self) -> dict:
        return {
            "success": self._success,
            "error": self._error.value if isinstance(self._error, ErrorCode) else self._error,
            "detail": self._detail,
            "data": self._data,
            "status_code": self._status_code,
            "trace": self._trace,
        }

    @classmethod
    def from_dict(cls, payload: dict) -> Response:
        error = payload.get("error")

        if error in ErrorCode._value2member_map_:
            error = ErrorCode(error)

        return cls(
            payload["success"],
            detail=payload.get("detail"),
            error=error,
            status_code=payload.get("status_code"),
            data=payload.get("data"),
            trace=payload.get("trace"),
        )

    # === dunder methods ===

    def __str__(self) -> str:
        if self._success:
            return f"Success: {self._detail or ''}"

        label = self._error.value if isinstance(self._error, ErrorCode) else self._error

        return f"Error: {label or ''}"
