"""
Run-tracking sink.

The host may attach a Runner to the platform to follow indexing progress.
Notifications are best effort: the platform behaves the same without one.
"""

from abc import ABC, abstractmethod
from enum import IntEnum

from ftsmeili.models.document import ErrorSeverity, Index
from ftsmeili.platform.logging import get_logger


class RunnerResult(IntEnum):
    SUCCESS = 1
    WARNING = 4
    FAIL = 9


class Runner(ABC):
    @abstractmethod
    def update_action(self, action: str, force: bool = False) -> None:
        """Report the action currently performed."""
        pass

    @abstractmethod
    def new_index_result(self, index: Index, message: str, status: str, result_type: RunnerResult) -> None:
        """Report the outcome of one document."""
        pass

    @abstractmethod
    def new_index_error(self, index: Index, message: str, exception: str, severity: ErrorSeverity) -> None:
        """Report an error raised while processing one document."""
        pass


class LoggingRunner(Runner):
    """Runner that reports everything to the structured log."""

    def __init__(self, name: str = "ftsmeili.runner"):
        self.logger = get_logger(name)

    def update_action(self, action: str, force: bool = False) -> None:
        self.logger.info("runner_action", action=action, force=force)

    def new_index_result(self, index: Index, message: str, status: str, result_type: RunnerResult) -> None:
        log = self.logger.info if result_type == RunnerResult.SUCCESS else self.logger.warning
        log(
            "index_result",
            provider_id=index.provider_id,
            document_id=index.document_id,
            status=status,
            result=result_type.name,
            message=message,
        )

    def new_index_error(self, index: Index, message: str, exception: str, severity: ErrorSeverity) -> None:
        self.logger.error(
            "index_error",
            provider_id=index.provider_id,
            document_id=index.document_id,
            exception=exception,
            severity=int(severity),
            message=message,
        )
