import io
import logging
import pytest
from unittest.mock import AsyncMock, MagicMock

from core.exceptions import SubmissionFailedException
from core.terminal.console import Console
from restake.entities import OperationReportEntity, WalletBalancesEntity
from restake.scheduler import RepeatingTask
from restake.session import SessionLoop
from restake.usecases import DepositUseCase, EnsureAllowanceUseCase


def scripted_console(*answers: str) -> Console:
    """
    Console answering prompts from a fixed script.

    Parameters
    ----------
    *answers : str
        Answers in prompt order

    Returns
    -------
    Console
        Console writing to a buffer
    """
    remaining = iter(answers)
    return Console(stream=io.StringIO(), reader=lambda prompt: next(remaining))


@pytest.fixture
def use_cases(wallet):
    """Mocked use cases keyed by session loop argument name."""
    return {
        "get_balances": AsyncMock(return_value=[
            WalletBalancesEntity(
                wallet_address=wallet.address,
                native_balance="1.5",
                token_symbol="exETH",
                token_balance="0.25"
            )
        ]),
        "deposit": AsyncMock(return_value=OperationReportEntity(wallet_address=wallet.address, operation="deposit")),
        "withdraw": AsyncMock(return_value=OperationReportEntity(wallet_address=wallet.address, operation="withdraw")),
        "claim": AsyncMock(return_value=[]),
    }


@pytest.fixture
def make_session(settings, logger, wallet, second_wallet, use_cases):
    def factory(*answers: str, **overrides) -> SessionLoop:
        params = {
            "console": scripted_console(*answers),
            "logger": logger,
            "settings": settings,
            "wallets": [wallet, second_wallet],
            **use_cases,
            **overrides,
        }
        return SessionLoop(**params)
    return factory


class TestSessionLoop:
    """
    Unit tests for the interactive menu.

    These tests verify:
    1. Menu choices dispatch to the operations for every wallet in order
    2. Errors are rendered and the loop returns to the menu
    3. The daily mode never returns to the menu once its first pass succeeds
    """

    @pytest.mark.asyncio
    async def test_exit(self, make_session, use_cases):
        session = make_session("4")

        assert await session.run() == 0
        use_cases["deposit"].assert_not_awaited()

    @pytest.mark.asyncio
    async def test_balances_are_shown(self, make_session, wallet):
        session = make_session("4")

        await session.run()

        output = session.console.stream.getvalue()
        assert "ETH (Holesky): 1.5" in output
        assert "exETH: 0.25" in output
        assert "4. Exit" in output

    @pytest.mark.asyncio
    async def test_deposit_once_for_every_wallet(self, make_session, use_cases, wallet, second_wallet):
        """
        Test run-once deposit across both wallets, then exit.

        Parameters
        ----------
        make_session : Callable
            Session factory
        use_cases : dict
            Mocked use cases
        wallet : WalletEntity
            First wallet
        second_wallet : WalletEntity
            Second wallet
        """
        session = make_session("1", "0.01", "2", "O", "", "4")

        assert await session.run() == 0

        assert [c.args for c in use_cases["deposit"].await_args_list] == [
            (wallet, "0.01", 2),
            (second_wallet, "0.01", 2),
        ]

    @pytest.mark.asyncio
    async def test_withdraw_defaults_count_to_one(self, make_session, use_cases, wallet, second_wallet):
        session = make_session("2", "0.001", "", "", "4")

        await session.run()

        assert [c.args for c in use_cases["withdraw"].await_args_list] == [
            (wallet, "0.001", 1),
            (second_wallet, "0.001", 1),
        ]

    @pytest.mark.asyncio
    async def test_claim_clamps_attempts(self, make_session, use_cases, wallet, second_wallet):
        session = make_session("3", "0", "", "4")

        await session.run()

        assert [c.args for c in use_cases["claim"].await_args_list] == [
            (wallet, 1),
            (second_wallet, 1),
        ]

    @pytest.mark.asyncio
    async def test_failure_aborts_pass_and_returns_to_menu(self, make_session, use_cases, wallet, caplog):
        """
        Test that a hard failure for the first wallet ends the pass and the
        loop keeps running.
        """
        use_cases["deposit"].side_effect = SubmissionFailedException("execution reverted: paused")
        session = make_session("1", "0.01", "1", "O", "", "4")

        with caplog.at_level(logging.ERROR):
            assert await session.run() == 0

        assert [c.args for c in use_cases["deposit"].await_args_list] == [(wallet, "0.01", 1)]
        assert "execution reverted: paused" in caplog.text

    @pytest.mark.asyncio
    async def test_invalid_amount_is_reported(self, make_session, use_cases, caplog):
        session = make_session("2", "abc", "1", "", "4")

        with caplog.at_level(logging.ERROR):
            await session.run()

        use_cases["withdraw"].assert_not_awaited()
        assert "Amount is not a number" in caplog.text

    @pytest.mark.asyncio
    async def test_invalid_count_is_reported(self, make_session, use_cases, caplog):
        session = make_session("3", "many", "", "4")

        with caplog.at_level(logging.ERROR):
            await session.run()

        use_cases["claim"].assert_not_awaited()
        assert "Count must be a whole number" in caplog.text

    @pytest.mark.asyncio
    async def test_invalid_option(self, make_session, caplog):
        session = make_session("9", "", "4")

        with caplog.at_level(logging.ERROR):
            assert await session.run() == 0

        assert "Invalid option." in caplog.text

    @pytest.mark.asyncio
    async def test_balance_failure_does_not_end_session(self, make_session, use_cases, caplog):
        use_cases["get_balances"].side_effect = RuntimeError("rpc timeout")
        session = make_session("4")

        with caplog.at_level(logging.WARNING):
            assert await session.run() == 0

        assert "Could not fetch balances: rpc timeout" in caplog.text

    @pytest.mark.asyncio
    async def test_schedule_daily(self, make_session, use_cases, settings, wallet, second_wallet):
        """
        Test that the daily mode deposits right away, runs one more full
        pass from the schedule after a simulated day, and never shows the
        menu again.
        """
        clock = {"now": 0.0, "sleeps": []}
        tasks = []

        async def fake_sleep(seconds):
            clock["sleeps"].append(seconds)
            clock["now"] += seconds

        def scheduler_factory(job, interval, logger):
            async def counted_job():
                await job()
                if task.runs == 0:
                    task.stop()

            task = RepeatingTask(
                job=counted_job,
                interval=interval,
                logger=logger,
                sleep=fake_sleep,
                clock=lambda: clock["now"]
            )
            tasks.append(task)
            return task

        session = make_session("1", "0.01", "3", "s", scheduler_factory=scheduler_factory)

        assert await session.run() == 0

        assert clock["sleeps"] == [settings.schedule_interval_seconds]
        assert [c.args for c in use_cases["deposit"].await_args_list] == [
            (wallet, "0.01", 3),
            (second_wallet, "0.01", 3),
            (wallet, "0.01", 3),
            (second_wallet, "0.01", 3),
        ]
        assert tasks[0].runs == 1
        assert session.console.stream.getvalue().count("DAILY DEPOSIT RUN") == 2

    @pytest.mark.asyncio
    async def test_schedule_daily_first_pass_failure_returns_to_menu(
        self, make_session, chain, settings, logger, caplog
    ):
        """
        Test that an amount the token cannot represent is reported from the
        first daily pass and no schedule is installed.
        """
        deposit = DepositUseCase(
            chain=chain,
            ensure_allowance=EnsureAllowanceUseCase(chain=chain, logger=logger),
            settings=settings,
            logger=logger
        )
        scheduler_factory = MagicMock()
        session = make_session(
            "1", "0.0000000000000000001", "1", "S", "", "4",
            deposit=deposit,
            scheduler_factory=scheduler_factory
        )

        with caplog.at_level(logging.ERROR):
            assert await session.run() == 0

        scheduler_factory.assert_not_called()
        chain.deposit.assert_not_awaited()
        assert "has more than 18 decimal places" in caplog.text
        assert session.console.stream.getvalue().count("4. Exit") == 2


class TestConsole:
    """
    Unit tests for terminal prompts and rendering.
    """

    def test_ask_strips_answer(self):
        prompts = []
        console = Console(stream=io.StringIO(), reader=lambda prompt: prompts.append(prompt) or "  0.5 \n")

        assert console.ask("Amount: ") == "0.5"
        assert prompts == ["Amount: "]

    def test_menu_numbers_options(self):
        console = Console(stream=io.StringIO())

        console.menu(["Deposit", "Exit"])

        assert console.stream.getvalue() == "1. Deposit\n2. Exit\n\n"
