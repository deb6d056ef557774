import logging
from typing import Annotated, AsyncIterable
from dishka import Provider, Scope, provide, FromComponent
from eth_account import Account
from web3 import AsyncWeb3

from core.environment.config import Settings
from core.environment.keys import load_private_keys, read_key_environment
from core.exceptions import ConfigurationException
from core.terminal.console import Console
from restake.entities import WalletEntity
from restake.services import ChainClient, Web3Service
from restake.session import SessionLoop
from restake.usecases import (
    ClaimUseCase,
    DepositUseCase,
    EnsureAllowanceUseCase,
    GetWalletBalancesUseCase,
    WithdrawUseCase
)


def make_wallets(private_keys: list[str]) -> list[WalletEntity]:
    """
    Build wallets from private keys.

    Parameters
    ----------
    private_keys : list[str]
        Hex private keys, with or without 0x prefix

    Returns
    -------
    list[WalletEntity]
        Wallets in key order

    Raises
    ------
    ConfigurationException
        If a key is malformed; the key itself is never echoed
    """
    wallets = []
    for position, key in enumerate(private_keys, start=1):
        try:
            account = Account.from_key(key)
        except Exception as e:
            raise ConfigurationException(
                f"Invalid private key #{position}: {type(e).__name__}"
            ) from None
        wallets.append(WalletEntity.from_account(account))
    return wallets


class RestakeProvider(Provider):
    """
    Provider for chain access, use cases and the session loop.
    """

    component = "restake"
    scope = Scope.APP

    @provide
    async def get_web3(
        self,
        settings: Annotated[Settings, FromComponent("environment")]
    ) -> AsyncIterable[AsyncWeb3]:
        """
        Provide Web3 client for the configured RPC endpoint.

        Parameters
        ----------
        settings : Settings
            Application settings

        Yields
        ------
        AsyncWeb3
            Web3 client instance
        """
        web3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(settings.rpc_url))
        try:
            yield web3
        finally:
            await web3.provider.disconnect()

    @provide
    def get_wallets(
        self,
        settings: Annotated[Settings, FromComponent("environment")]
    ) -> list[WalletEntity]:
        """
        Provide wallets from ``PRIVATE_KEY_<n>`` entries.

        Parameters
        ----------
        settings : Settings
            Application settings

        Returns
        -------
        list[WalletEntity]
            Wallets in ascending key order
        """
        keys = load_private_keys(read_key_environment(settings.get_env_file()))
        return make_wallets(keys)

    @provide
    def get_chain_client(
        self,
        web3: Annotated[AsyncWeb3, FromComponent("restake")],
        settings: Annotated[Settings, FromComponent("environment")],
        logger: Annotated[logging.Logger, FromComponent("logger")]
    ) -> ChainClient:
        """
        Provide the chain client adapter.

        Parameters
        ----------
        web3 : AsyncWeb3
            Web3 client
        settings : Settings
            Application settings
        logger : logging.Logger
            Logger instance

        Returns
        -------
        ChainClient
            Web3-backed chain client
        """
        return Web3Service(
            web3=web3,
            logger=logger,
            receipt_timeout=settings.tx_receipt_timeout
        )

    @provide
    def get_ensure_allowance_use_case(
        self,
        chain: Annotated[ChainClient, FromComponent("restake")],
        logger: Annotated[logging.Logger, FromComponent("logger")]
    ) -> EnsureAllowanceUseCase:
        """
        Provide allowance guard use case.

        Parameters
        ----------
        chain : ChainClient
            Chain client
        logger : logging.Logger
            Logger instance

        Returns
        -------
        EnsureAllowanceUseCase
            Allowance guard
        """
        return EnsureAllowanceUseCase(chain=chain, logger=logger)

    @provide
    def get_deposit_use_case(
        self,
        chain: Annotated[ChainClient, FromComponent("restake")],
        ensure_allowance: Annotated[EnsureAllowanceUseCase, FromComponent("restake")],
        settings: Annotated[Settings, FromComponent("environment")],
        logger: Annotated[logging.Logger, FromComponent("logger")]
    ) -> DepositUseCase:
        """
        Provide deposit use case.

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

        Returns
        -------
        DepositUseCase
            Deposit use case
        """
        return DepositUseCase(
            chain=chain,
            ensure_allowance=ensure_allowance,
            settings=settings,
            logger=logger
        )

    @provide
    def get_withdraw_use_case(
        self,
        chain: Annotated[ChainClient, FromComponent("restake")],
        ensure_allowance: Annotated[EnsureAllowanceUseCase, FromComponent("restake")],
        settings: Annotated[Settings, FromComponent("environment")],
        logger: Annotated[logging.Logger, FromComponent("logger")]
    ) -> WithdrawUseCase:
        """
        Provide withdraw use case.

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

        Returns
        -------
        WithdrawUseCase
            Withdraw use case
        """
        return WithdrawUseCase(
            chain=chain,
            ensure_allowance=ensure_allowance,
            settings=settings,
            logger=logger
        )

    @provide
    def get_claim_use_case(
        self,
        chain: Annotated[ChainClient, FromComponent("restake")],
        settings: Annotated[Settings, FromComponent("environment")],
        logger: Annotated[logging.Logger, FromComponent("logger")]
    ) -> ClaimUseCase:
        """
        Provide claim use case.

        Parameters
        ----------
        chain : ChainClient
            Chain client
        settings : Settings
            Application settings
        logger : logging.Logger
            Logger instance

        Returns
        -------
        ClaimUseCase
            Claim use case
        """
        return ClaimUseCase(chain=chain, settings=settings, logger=logger)

    @provide
    def get_wallet_balances_use_case(
        self,
        chain: Annotated[ChainClient, FromComponent("restake")],
        settings: Annotated[Settings, FromComponent("environment")]
    ) -> GetWalletBalancesUseCase:
        """
        Provide wallet balances use case.

        Parameters
        ----------
        chain : ChainClient
            Chain client
        settings : Settings
            Application settings

        Returns
        -------
        GetWalletBalancesUseCase
            Balance summary use case
        """
        return GetWalletBalancesUseCase(chain=chain, settings=settings)

    @provide
    def get_session_loop(
        self,
        console: Annotated[Console, FromComponent("terminal")],
        logger: Annotated[logging.Logger, FromComponent("logger")],
        settings: Annotated[Settings, FromComponent("environment")],
        wallets: Annotated[list[WalletEntity], FromComponent("restake")],
        get_balances: Annotated[GetWalletBalancesUseCase, FromComponent("restake")],
        deposit: Annotated[DepositUseCase, FromComponent("restake")],
        withdraw: Annotated[WithdrawUseCase, FromComponent("restake")],
        claim: Annotated[ClaimUseCase, FromComponent("restake")]
    ) -> SessionLoop:
        """
        Provide the interactive session loop.

        Returns
        -------
        SessionLoop
            Session loop over all configured wallets
        """
        return SessionLoop(
            console=console,
            logger=logger,
            settings=settings,
            wallets=wallets,
            get_balances=get_balances,
            deposit=deposit,
            withdraw=withdraw,
            claim=claim
        )
