# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Copilot-for-Consensus contributors

"""Abstract structured logger.

Records are a message plus keyword fields. Providers pass their
``service``/``provider``/``name`` context and diagnostic fields
(``attr``, ``mapping``, ``reason``, ``type``) as keywords, and every
backend keeps them as separate fields rather than formatting them into
the message.
"""

from abc import ABC, abstractmethod
from typing import Any


class Logger(ABC):
    """Abstract base class for structured loggers."""

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning; normalization diagnostics use this level."""
        pass

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None:
        pass

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log an error-level message from inside an exception handler."""
        kwargs.setdefault("exc_info", True)
        self.error(message, **kwargs)
