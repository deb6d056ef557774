import sys
from collections.abc import Callable, Sequence
from typing import TextIO
from colorama import Fore, Style


class Console:
    """
    Terminal rendering and prompts.

    Prompts are plain blocking calls; nothing else runs while the menu
    waits, and Ctrl+C interrupts the prompt immediately.

    Parameters
    ----------
    stream : TextIO
        Output stream
    reader : Callable[[str], str]
        Blocking prompt function, ``input`` by default
    """

    LINE_WIDTH = 40

    def __init__(
        self,
        stream: TextIO | None = None,
        reader: Callable[[str], str] = input
    ):
        self.stream = stream or sys.stdout
        self.reader = reader

    def line(self, text: str = "") -> None:
        """
        Write one line and flush.

        Parameters
        ----------
        text : str
            Line content
        """
        print(text, file=self.stream, flush=True)

    def banner(self, title: str) -> None:
        """
        Render the application banner.

        Parameters
        ----------
        title : str
            Banner text
        """
        width = max(len(title) + 6, self.LINE_WIDTH)
        color = Fore.BLUE + Style.BRIGHT
        self.line()
        self.line(f"{color}╔{'═' * width}╗{Style.RESET_ALL}")
        self.line(f"{color}║{title.center(width)}║{Style.RESET_ALL}")
        self.line(f"{color}╚{'═' * width}╝{Style.RESET_ALL}")
        self.line()

    def section(self, title: str | None = None) -> None:
        """
        Render a section header between two rules.

        Parameters
        ----------
        title : str | None
            Header text, omitted when empty
        """
        rule = f"{Fore.LIGHTBLACK_EX}{'─' * self.LINE_WIDTH}{Style.RESET_ALL}"
        self.line()
        self.line(rule)
        if title:
            self.line(f"{Fore.WHITE}{Style.BRIGHT} {title} {Style.RESET_ALL}")
        self.line(rule)
        self.line()

    def menu(self, options: Sequence[str]) -> None:
        """
        Render numbered options starting from 1.

        Parameters
        ----------
        options : Sequence[str]
            Option labels in display order
        """
        for number, option in enumerate(options, start=1):
            self.line(f"{number}. {option}")
        self.line()

    def ask(self, prompt: str) -> str:
        """
        Ask a question and return the trimmed answer.

        Parameters
        ----------
        prompt : str
            Question text

        Returns
        -------
        str
            Answer without surrounding whitespace
        """
        answer = self.reader(prompt)
        return answer.strip()

    def press_enter(self) -> None:
        self.ask("\nPress Enter to return to the main menu...")
