"""
Base Service.

Base class for stateful board services. Provides a module-scoped logger
and structured operation logging bound to a source.

Usage:
    from coldboard.backend.services.base import BaseService

    class BoardThing(BaseService):
        def __init__(self, scope: BoardScope) -> None:
            super().__init__(source="board", board_scope=scope.slug)

        def do_it(self, note_id: str) -> None:
            self._log_operation("Doing it", note_id=note_id)
"""

from typing import Any

from coldboard.backend.core.logging import get_logger


class BaseService:
    """
    Base class for all services.

    Provides:
    - Logger named after the subclass module
    - Context fields (source, board scope) merged into every log record
    """

    def __init__(self, source: str = "internal", **context: Any) -> None:
        self._logger = get_logger(self.__class__.__module__)
        self._context = {"source": source, **context}

    def _log_operation(self, operation: str, **context: Any) -> None:
        """Log a service operation at info level with context."""
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **self._context, **context},
        )

    def _log_debug(self, message: str, **context: Any) -> None:
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **self._context, **context},
        )

    def _log_failure(self, message: str, error: Exception, **context: Any) -> None:
        """Log a failed remote call. The caller decides how to recover."""
        self._logger.warning(
            message,
            extra={
                "service": self.__class__.__name__,
                **self._context,
                **context,
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )
