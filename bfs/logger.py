"""Optional logging capability for the buffered file system.

The core never logs through a module-level logger. Instead it is handed a
Logger, which forwards ``debug``/``error``/``info`` calls to caller-supplied
functions and silently drops anything the caller didn't supply.
"""

import logging
from typing import Any, Callable, Dict, Optional

LoggerFunc = Callable[[str, Optional[Dict[str, Any]]], None]


class Logger:
    """Passthrough logger with three optional sinks.

    Usage:
        >>> Logger()                                   # drops everything
        >>> Logger(debug=lambda msg, data=None: print(msg, data))
        >>> Logger.from_logging(logging.getLogger("bfs"))
    """

    def __init__(
        self,
        debug: Optional[LoggerFunc] = None,
        error: Optional[LoggerFunc] = None,
        info: Optional[LoggerFunc] = None,
    ):
        self._debug = debug
        self._error = error
        self._info = info

    @classmethod
    def from_logging(cls, std_logger: logging.Logger) -> "Logger":
        """Build a Logger that writes to a standard library logger.

        Args:
            std_logger: Logger to forward to

        Returns:
            Logger whose three sinks call ``std_logger`` at the matching level
        """
        def sink(level: int) -> LoggerFunc:
            def log(message: str, data: Optional[Dict[str, Any]] = None) -> None:
                if not std_logger.isEnabledFor(level):
                    return
                if data:
                    fields = " ".join(f"{key}={value!r}" for key, value in data.items())
                    std_logger.log(level, "%s %s", message, fields)
                else:
                    std_logger.log(level, "%s", message)
            return log

        return cls(
            debug=sink(logging.DEBUG),
            error=sink(logging.ERROR),
            info=sink(logging.INFO),
        )

    def debug(self, message: str, data: Optional[Dict[str, Any]] = None) -> None:
        if self._debug is None:
            return
        self._debug(message, data)

    def error(self, message: str, data: Optional[Dict[str, Any]] = None) -> None:
        if self._error is None:
            return
        self._error(message, data)

    def info(self, message: str, data: Optional[Dict[str, Any]] = None) -> None:
        if self._info is None:
            return
        self._info(message, data)
