from colorama import just_fix_windows_console
from dishka import Provider, Scope, provide

from core.terminal.console import Console


class TerminalProvider(Provider):
    """
    Provider for the interactive terminal.
    """

    component = "terminal"
    scope = Scope.APP

    @provide
    def get_console(self) -> Console:
        """
        Provide console bound to stdin/stdout.

        Returns
        -------
        Console
            Console instance
        """
        just_fix_windows_console()
        return Console()
