import logging
from colorama import Fore, Style

SUCCESS = 25
STEP = 22

logging.addLevelName(SUCCESS, "SUCCESS")
logging.addLevelName(STEP, "STEP")


class ConsoleFormatter(logging.Formatter):
    """
    Single-line colored formatter for terminal output.

    Every level gets its own marker and color; ``SUCCESS`` and ``STEP`` are
    extra levels registered by this module.
    """

    STYLES = {
        logging.DEBUG: (Fore.MAGENTA, "[*]"),
        logging.INFO: (Fore.CYAN, "[i]"),
        STEP: (Fore.BLUE + Style.BRIGHT, "[>]"),
        SUCCESS: (Fore.GREEN, "[+]"),
        logging.WARNING: (Fore.YELLOW, "[!]"),
        logging.ERROR: (Fore.RED, "[x]"),
        logging.CRITICAL: (Fore.RED + Style.BRIGHT, "[FATAL]"),
    }

    def format(self, record: logging.LogRecord) -> str:
        color, marker = self.STYLES.get(record.levelno, (Fore.WHITE, "[-]"))
        message = f"{color}{marker} {record.getMessage()}{Style.RESET_ALL}"
        if record.exc_info and record.levelno <= logging.DEBUG:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message
