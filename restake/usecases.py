import logging
from decimal import Decimal

from web3 import Web3

from core.environment.config import Settings
from core.exception_handler import short_reason
from core.exceptions import InsufficientBalanceException
from core.logging.formatters import STEP, SUCCESS
from restake.entities import (
    AmountEntity,
    ClaimAttemptEntity,
    OperationReportEntity,
    WalletBalancesEntity,
    WalletEntity
)
from restake.services import ChainClient


class EnsureAllowanceUseCase:
    """
    Use case making sure a spender may transfer a required amount.

    Approves exactly the required amount, never an unlimited allowance.

    Parameters
    ----------
    chain : ChainClient
        Chain client
    logger : logging.Logger
        Logger instance
    """

    def __init__(self, chain: ChainClient, logger: logging.Logger):
        self.chain = chain
        self.logger = logger

    async def __call__(
        self,
        wallet: WalletEntity,
        token: str,
        spender: str,
        required: int
    ) -> bool:
        """
        Execute use case.

        Parameters
        ----------
        wallet : WalletEntity
            Token owner
        token : str
            Token address
        spender : str
            Contract that will pull the tokens
        required : int
            Required allowance in base units

        Returns
        -------
        bool
            True if an approval transaction was mined, False if the current
            allowance already covered the amount
        """
        current = await self.chain.get_allowance(token, wallet.address, spender)
        if current >= required:
            return False

        self.logger.log(STEP, f"Approving allowance to {spender} ...")
        receipt = await self.chain.approve(wallet, token, spender, required)
        self.logger.log(SUCCESS, f"Approve confirmed. tx: {receipt.transaction_hash}")
        return True


class DepositUseCase:
    """
    Use case depositing WETH into the deposit contract.

    Parameters
    ----------
    chain : ChainClient
        Chain client
    ensure_allowance : EnsureAllowanceUseCase
        Allowance guard
    settings : Settings
        Application settings
    logger : logging.Logger
        Logger instance
    """

    def __init__(
        self,
        chain: ChainClient,
        ensure_allowance: EnsureAllowanceUseCase,
        settings: Settings,
        logger: logging.Logger
    ):
        self.chain = chain
        self.ensure_allowance = ensure_allowance
        self.settings = settings
        self.logger = logger

    async def __call__(
        self,
        wallet: WalletEntity,
        amount: str,
        times: int
    ) -> OperationReportEntity:
        """
        Execute use case.

        Iterations without enough WETH are skipped; any other failure
        propagates and ends the run.

        Parameters
        ----------
        wallet : WalletEntity
            Depositing wallet
        amount : str
            WETH amount per transaction
        times : int
            Number of deposits

        Returns
        -------
        OperationReportEntity
            Receipts and skipped iteration count
        """
        weth = self.settings.weth_address
        decimals = await self.chain.get_token_decimals(weth)
        value = AmountEntity.parse(amount, decimals)
        report = OperationReportEntity(wallet_address=wallet.address, operation="deposit")

        for i in range(1, times + 1):
            self.logger.log(STEP, f"Deposit {i}/{times} for {wallet.address} ...")

            try:
                await self._check_balance(wallet, value)
            except InsufficientBalanceException as e:
                self.logger.warning(e.message)
                report.skipped += 1
                continue

            await self.ensure_allowance(
                wallet, weth, self.settings.deposit_contract_address, value.base_units
            )

            self.logger.info(f"Calling deposit(WETH, {value.text}) ...")
            receipt = await self.chain.deposit(
                wallet, self.settings.deposit_contract_address, weth, value.base_units
            )
            report.receipts.append(receipt)
            self.logger.log(SUCCESS, f"Deposit confirmed. tx: {receipt.transaction_hash}")

        return report

    async def _check_balance(self, wallet: WalletEntity, value: AmountEntity) -> None:
        balance = await self.chain.get_token_balance(self.settings.weth_address, wallet.address)
        if balance < value.base_units:
            raise InsufficientBalanceException(
                f"Insufficient WETH. Needed {value.text}, "
                f"have {AmountEntity.from_base_units(balance, value.decimals).text}. Wrap ETH to WETH"
            )


class WithdrawUseCase:
    """
    Use case requesting exETH withdrawals back to WETH.

    Parameters
    ----------
    chain : ChainClient
        Chain client
    ensure_allowance : EnsureAllowanceUseCase
        Allowance guard
    settings : Settings
        Application settings
    logger : logging.Logger
        Logger instance
    """

    def __init__(
        self,
        chain: ChainClient,
        ensure_allowance: EnsureAllowanceUseCase,
        settings: Settings,
        logger: logging.Logger
    ):
        self.chain = chain
        self.ensure_allowance = ensure_allowance
        self.settings = settings
        self.logger = logger

    async def __call__(
        self,
        wallet: WalletEntity,
        amount: str,
        times: int
    ) -> OperationReportEntity:
        """
        Execute use case.

        The exETH balance is not checked up front; an oversized withdrawal
        fails at submission.

        Parameters
        ----------
        wallet : WalletEntity
            Withdrawing wallet
        amount : str
            exETH amount per transaction
        times : int
            Number of withdrawals

        Returns
        -------
        OperationReportEntity
            Receipts of the withdraw transactions
        """
        exeth = self.settings.exeth_address
        withdraw_contract = self.settings.withdraw_contract_address
        decimals = await self.chain.get_token_decimals(exeth)
        value = AmountEntity.parse(amount, decimals)
        report = OperationReportEntity(wallet_address=wallet.address, operation="withdraw")

        for i in range(1, times + 1):
            self.logger.log(STEP, f"Withdraw {i}/{times} for {wallet.address} ...")

            await self.ensure_allowance(wallet, exeth, withdraw_contract, value.base_units)

            self.logger.info(f"Calling withdraw({value.text} exETH, WETH) ...")
            receipt = await self.chain.withdraw(
                wallet, withdraw_contract, value.base_units, self.settings.weth_address
            )
            report.receipts.append(receipt)
            self.logger.log(SUCCESS, f"Withdraw submitted. tx: {receipt.transaction_hash}")
            self.logger.info(
                f"Typical unlock to claim is ~{self.settings.claim_delay_minutes} minutes after withdraw."
            )

        return report


class ClaimUseCase:
    """
    Use case claiming matured withdrawal requests.

    Request indices are tried blindly from 0; a failed index is logged and
    the scan moves on.

    Parameters
    ----------
    chain : ChainClient
        Chain client
    settings : Settings
        Application settings
    logger : logging.Logger
        Logger instance
    """

    def __init__(self, chain: ChainClient, settings: Settings, logger: logging.Logger):
        self.chain = chain
        self.settings = settings
        self.logger = logger

    async def __call__(self, wallet: WalletEntity, attempts: int) -> list[ClaimAttemptEntity]:
        """
        Execute use case.

        Parameters
        ----------
        wallet : WalletEntity
            Claiming wallet
        attempts : int
            Number of request indices to try

        Returns
        -------
        list[ClaimAttemptEntity]
            One entry per index, in index order
        """
        self.logger.info(
            "Proceeding to direct claims (no index scanning). If a request isn't ready "
            f"(~{self.settings.claim_delay_minutes} min), the tx may revert."
        )

        results = []
        for index in range(attempts):
            self.logger.log(STEP, f"Claiming index {index} for {wallet.address} ...")
            try:
                receipt = await self.chain.claim(
                    wallet, self.settings.withdraw_contract_address, index
                )
            except Exception as e:
                reason = short_reason(e)
                self.logger.warning(f"Claim index {index} failed: {reason}")
                results.append(ClaimAttemptEntity(index=index, succeeded=False, reason=reason))
                continue

            self.logger.log(SUCCESS, f"Claimed index {index}. tx: {receipt.transaction_hash}")
            results.append(
                ClaimAttemptEntity(
                    index=index,
                    succeeded=True,
                    transaction_hash=receipt.transaction_hash
                )
            )

        return results


class GetWalletBalancesUseCase:
    """
    Use case reading the balances shown above the menu.

    Parameters
    ----------
    chain : ChainClient
        Chain client
    settings : Settings
        Application settings
    """

    DEFAULT_SYMBOL = "exETH"

    def __init__(self, chain: ChainClient, settings: Settings):
        self.chain = chain
        self.settings = settings

    async def __call__(self, wallets: list[WalletEntity]) -> list[WalletBalancesEntity]:
        exeth = self.settings.exeth_address
        decimals = await self.chain.get_token_decimals(exeth)
        symbol = await self.chain.get_token_symbol(exeth, self.DEFAULT_SYMBOL)

        balances = []
        for wallet in wallets:
            native = await self.chain.get_native_balance(wallet.address)
            token = await self.chain.get_token_balance(exeth, wallet.address)
            balances.append(
                WalletBalancesEntity(
                    wallet_address=wallet.address,
                    native_balance=f"{Decimal(Web3.from_wei(native, 'ether')):f}",
                    token_symbol=symbol,
                    token_balance=AmountEntity.from_base_units(token, decimals).text
                )
            )
        return balances
