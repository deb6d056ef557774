import logging

from core.exceptions import BaseCustomException


def short_reason(exc: BaseException) -> str:
    """
    Extract the shortest human-readable reason from an exception.

    Our own exceptions and web3 errors both carry a ``message`` attribute;
    revert reasons from the node end up there. Everything else falls back to
    the first line of ``str(exc)``.

    Parameters
    ----------
    exc : BaseException
        Exception to describe

    Returns
    -------
    str
        Single-line reason
    """
    if isinstance(exc, BaseCustomException):
        return exc.message

    message = getattr(exc, "message", None)
    if isinstance(message, str) and message.strip():
        return message.strip().splitlines()[0]

    text = str(exc).strip()
    if text:
        return text.splitlines()[0]

    return type(exc).__name__


def render_exception(logger: logging.Logger, exc: BaseException) -> None:
    """
    Handler for errors raised by menu actions.

    Parameters
    ----------
    logger : logging.Logger
        Logger to report through
    exc : BaseException
        Exception to render
    """
    logger.debug("Operation failed", exc_info=exc)
    logger.error(short_reason(exc))
