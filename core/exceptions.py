from abc import ABC


class BaseCustomException(Exception, ABC):
    """
    Base class for all custom exceptions.
    """

    def __init__(self, message: str | None = None):
        self.message = message or self.get_default_message()
        super().__init__(self.message)

    def get_default_message(self) -> str:
        """
        Return default error message.

        Returns
        -------
        str
            Default error message
        """
        return "Unknown error"

    def get_exit_code(self) -> int:
        """
        Return process exit code used when the exception is fatal.

        Returns
        -------
        int
            Exit code
        """
        return 1


class InvalidAmountException(BaseCustomException):
    """Amount or count entered by the user is not usable."""

    def get_default_message(self) -> str:
        return "Invalid amount"


class InsufficientBalanceException(BaseCustomException):
    """Wallet holds less than the amount an iteration needs."""

    def get_default_message(self) -> str:
        return "Insufficient balance"


class SubmissionFailedException(BaseCustomException):
    """Transaction could not be built or sent."""

    def get_default_message(self) -> str:
        return "Transaction submission failed"


class TransactionRevertedException(BaseCustomException):
    """Transaction was mined with a failed status."""

    def get_default_message(self) -> str:
        return "Transaction reverted"


class ConfigurationException(BaseCustomException):
    """Startup configuration is missing or malformed."""

    def get_default_message(self) -> str:
        return "Invalid configuration"
