from typing import cast

import structlog


class LoggerMixin:
    """Mixin class giving a class a logger named after its module and class"""

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        """Get logger instance for this class"""
        cls = type(self)
        return cast(
            "structlog.stdlib.BoundLogger",
            structlog.get_logger(f"{cls.__module__}.{cls.__qualname__}"),
        )
