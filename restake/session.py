import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from functools import partial

from core.environment.config import Settings
from core.exception_handler import render_exception, short_reason
from core.logging.formatters import SUCCESS
from core.terminal.console import Console
from restake.entities import WalletEntity
from restake.scheduler import RepeatingTask
from restake.schemas import ClaimRequest, DepositRequest, WithdrawRequest, parse_request
from restake.usecases import (
    ClaimUseCase,
    DepositUseCase,
    GetWalletBalancesUseCase,
    WithdrawUseCase
)

BANNER = "Restake CLI · Holesky"
MENU_OPTIONS = ("Deposit", "Withdraw", "Claim", "Exit")
EXIT_CHOICE = "4"


class SessionLoop:
    """
    Interactive menu driving the operations over every loaded wallet.

    Errors raised by a menu action are rendered and the loop returns to the
    menu. A failure in the middle of a pass ends that whole pass, remaining
    wallets included; only claims are isolated per request index.

    Parameters
    ----------
    console : Console
        Terminal collaborator
    logger : logging.Logger
        Logger instance
    settings : Settings
        Application settings
    wallets : list[WalletEntity]
        Wallets loaded at startup
    get_balances : GetWalletBalancesUseCase
        Balance summary use case
    deposit : DepositUseCase
        Deposit use case
    withdraw : WithdrawUseCase
        Withdraw use case
    claim : ClaimUseCase
        Claim use case
    scheduler_factory : Callable[..., RepeatingTask]
        Builds the repeating task used by the daily deposit mode
    """

    def __init__(
        self,
        console: Console,
        logger: logging.Logger,
        settings: Settings,
        wallets: list[WalletEntity],
        get_balances: GetWalletBalancesUseCase,
        deposit: DepositUseCase,
        withdraw: WithdrawUseCase,
        claim: ClaimUseCase,
        scheduler_factory: Callable[..., RepeatingTask] = RepeatingTask
    ):
        self.console = console
        self.logger = logger
        self.settings = settings
        self.wallets = wallets
        self.get_balances = get_balances
        self.deposit = deposit
        self.withdraw = withdraw
        self.claim = claim
        self.scheduler_factory = scheduler_factory
        self.handlers: dict[str, Callable[[], Awaitable[bool]]] = {
            "1": self.deposit_flow,
            "2": self.withdraw_flow,
            "3": self.claim_flow,
        }

    async def run(self) -> int:
        """
        Run the menu until the user exits or switches to scheduled mode.

        Returns
        -------
        int
            Process exit code
        """
        self.console.banner(BANNER)

        while True:
            await self.show_balances()

            self.console.section("MENU")
            self.console.menu(MENU_OPTIONS)
            choice = self.console.ask(f"Choose option (1-{len(MENU_OPTIONS)}): ")

            if choice == EXIT_CHOICE:
                return 0

            try:
                handler = self.handlers.get(choice)
                if handler is None:
                    self.logger.error("Invalid option.")
                elif await handler():
                    return 0
            except Exception as e:
                render_exception(self.logger, e)

            self.console.press_enter()
            self.console.banner(BANNER)

    async def show_balances(self) -> None:
        self.logger.info("Fetching balances (ETH Holesky & exETH) ...")
        try:
            balances = await self.get_balances(self.wallets)
        except Exception as e:
            self.logger.warning(f"Could not fetch balances: {short_reason(e)}")
            return

        for balance in balances:
            self.logger.info(f"Wallet {balance.wallet_address}")
            self.console.line(f"ETH (Holesky): {balance.native_balance}")
            self.console.line(f"{balance.token_symbol}: {balance.token_balance}")
        self.console.line()

    async def deposit_flow(self) -> bool:
        """
        Collect deposit parameters and run once or switch to the schedule.

        Returns
        -------
        bool
            True if the session switched to scheduled mode
        """
        amount = self.console.ask("Amount per tx (in WETH), e.g., 0.01: ")
        times = self.console.ask("How many transactions per wallet?: ")
        mode = self.console.ask(
            f"Run once (O) or Schedule daily (S - {self.settings.schedule_interval_hours:g} hours)? [O/S]: "
        )
        request = parse_request(DepositRequest, amount=amount, times=times, mode=mode)

        if request.mode == "daily":
            await self.schedule_deposits(request)
            return True

        await self.deposit_pass(request)
        return False

    async def withdraw_flow(self) -> bool:
        """
        Collect withdraw parameters and run one pass over every wallet.

        Returns
        -------
        bool
            Always False, the menu comes back afterwards
        """
        amount = self.console.ask("Amount per tx (in exETH), e.g., 0.001: ")
        times = self.console.ask("How many transactions per wallet?: ")
        request = parse_request(WithdrawRequest, amount=amount, times=times)

        for wallet in self.wallets:
            self.console.line()
            self.logger.info(f"--- Withdraw for {wallet.address} ---")
            await self.withdraw(wallet, request.amount, request.times)
        return False

    async def claim_flow(self) -> bool:
        """
        Collect the attempt count and claim for every wallet.

        Returns
        -------
        bool
            Always False, the menu comes back afterwards
        """
        attempts = self.console.ask("How many claims to attempt per wallet?: ")
        request = parse_request(ClaimRequest, attempts=attempts)

        for wallet in self.wallets:
            self.console.line()
            self.logger.info(f"--- Claim for {wallet.address} ---")
            await self.claim(wallet, request.attempts)
        return False

    async def deposit_pass(self, request: DepositRequest) -> None:
        """
        Deposit for every wallet in order.

        Parameters
        ----------
        request : DepositRequest
            Validated deposit parameters
        """
        for wallet in self.wallets:
            self.console.line()
            self.logger.info(f"--- Deposit for {wallet.address} ---")
            await self.deposit(wallet, request.amount, request.times)

    async def scheduled_deposit_run(self, request: DepositRequest) -> None:
        self.console.section(f"DAILY DEPOSIT RUN: {datetime.now():%Y-%m-%d %H:%M:%S}")
        await self.deposit_pass(request)
        self.logger.log(
            SUCCESS,
            f"Deposit run completed. Waiting {self.settings.schedule_interval_hours:g} hours for next run..."
        )

    async def schedule_deposits(self, request: DepositRequest) -> None:
        """
        Switch to unattended mode: deposit now, then on every interval.

        The first run happens before the schedule is installed, so its
        errors reach the menu. Once it succeeds the session never returns to
        the menu; the schedule only ends when the process is interrupted.

        Parameters
        ----------
        request : DepositRequest
            Validated deposit parameters
        """
        await self.scheduled_deposit_run(request)

        self.logger.log(SUCCESS, "Daily deposit schedule started.")
        self.logger.info(f"Amount: {request.amount} WETH, Tx/Wallet: {request.times}.")
        self.logger.info("Running in scheduled mode. Press CTRL+C to stop.")

        task = self.scheduler_factory(
            job=partial(self.scheduled_deposit_run, request),
            interval=self.settings.schedule_interval_seconds,
            logger=self.logger
        )
        await task.run(immediately=False)
