import logging
import sys
from typing import Annotated
from dishka import Provider, provide, Scope, FromComponent

from core.environment.config import Settings
from core.logging.formatters import ConsoleFormatter

LOGGER_NAME = "restake_cli"


def configure_logger(level: str | None = None) -> logging.Logger:
    """
    Configure the application logger.

    Parameters
    ----------
    level : str | None
        Log level name; an already configured logger keeps its level when
        omitted, a fresh one starts at INFO

    Returns
    -------
    logging.Logger
        Logger writing colored lines to stdout
    """
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(ConsoleFormatter())
        logger.addHandler(handler)
        logger.propagate = False
        logger.setLevel(level or logging.INFO)
    elif level:
        logger.setLevel(level)
    return logger


class LoggerProvider(Provider):
    """
    Provider for logging configuration and logger instances.

    Configures logging to output to console (stdout) at the configured level.
    """
    component = "logger"

    @provide(scope=Scope.APP)
    def get_logger(
        self,
        settings: Annotated[Settings, FromComponent("environment")]
    ) -> logging.Logger:
        """
        Provide configured logger instance.

        Parameters
        ----------
        settings : Settings
            Application settings

        Returns
        -------
        logging.Logger
            Configured logger that writes to console
        """
        return configure_logger(settings.log_level)
