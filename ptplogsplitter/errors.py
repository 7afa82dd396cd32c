from __future__ import annotations


class LogSplitterError(Exception):
    """
    Base class for all fatal errors raised while splitting a log. Each error names
    the operation that failed and keeps the underlying OSError (if any) as `cause`.
    """
    exit_status = 2

    def __init__(self, operation: str, cause: BaseException | None = None):
        super().__init__(operation, cause)
        self.operation = operation
        self.cause = cause

    def __str__(self):
        if self.cause is None:
            return self.operation
        return f"{self.operation}: {self.cause}"


class InputOpenError(LogSplitterError):
    pass


class InputReadError(LogSplitterError):
    pass


class OutputCreateError(LogSplitterError):
    pass


class OutputWriteError(LogSplitterError):
    pass


class OutputFinalizeError(LogSplitterError):
    pass


class FallbackPromotionError(LogSplitterError):
    pass
