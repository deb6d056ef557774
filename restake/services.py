import logging
from typing import Any, Protocol
import aiohttp
from web3 import AsyncWeb3
from web3.exceptions import Web3Exception

from core.exception_handler import short_reason
from core.exceptions import SubmissionFailedException, TransactionRevertedException
from restake.abi import DEPOSIT_ABI, ERC20_ABI, WITHDRAW_ABI
from restake.entities import TransactionReceiptEntity, WalletEntity


class ChainClient(Protocol):
    """
    Narrow chain interface the use cases depend on.

    Reads return raw integers in base units; writes block until the
    transaction is mined and return its receipt.
    """

    async def get_native_balance(self, address: str) -> int: ...

    async def get_token_balance(self, token: str, owner: str) -> int: ...

    async def get_token_decimals(self, token: str, default: int = 18) -> int: ...

    async def get_token_symbol(self, token: str, default: str) -> str: ...

    async def get_allowance(self, token: str, owner: str, spender: str) -> int: ...

    async def approve(
        self, wallet: WalletEntity, token: str, spender: str, amount: int
    ) -> TransactionReceiptEntity: ...

    async def deposit(
        self, wallet: WalletEntity, contract_address: str, token: str, amount: int
    ) -> TransactionReceiptEntity: ...

    async def withdraw(
        self, wallet: WalletEntity, contract_address: str, amount: int, asset_out: str
    ) -> TransactionReceiptEntity: ...

    async def claim(
        self, wallet: WalletEntity, contract_address: str, index: int
    ) -> TransactionReceiptEntity: ...


class Web3Service:
    """
    Chain client backed by ``AsyncWeb3``.

    Parameters
    ----------
    web3 : AsyncWeb3
        Web3 client connected to the target network
    logger : logging.Logger
        Logger instance
    receipt_timeout : float
        Seconds to wait for a transaction to be mined
    """

    def __init__(
        self,
        web3: AsyncWeb3,
        logger: logging.Logger,
        receipt_timeout: float = 120
    ):
        self.web3 = web3
        self.logger = logger
        self.receipt_timeout = receipt_timeout

    def _contract(self, address: str, abi: list[dict[str, Any]]):
        return self.web3.eth.contract(
            address=self.web3.to_checksum_address(address),
            abi=abi
        )

    async def get_native_balance(self, address: str) -> int:
        """
        Get gas token balance.

        Parameters
        ----------
        address : str
            Wallet address

        Returns
        -------
        int
            Balance in wei
        """
        balance = await self.web3.eth.get_balance(self.web3.to_checksum_address(address))
        return int(balance)

    async def get_token_balance(self, token: str, owner: str) -> int:
        """
        Get ERC-20 balance.

        Parameters
        ----------
        token : str
            Token address
        owner : str
            Holder address

        Returns
        -------
        int
            Balance in token base units
        """
        contract = self._contract(token, ERC20_ABI)
        balance = await contract.functions.balanceOf(
            self.web3.to_checksum_address(owner)
        ).call()
        return int(balance)

    async def get_token_decimals(self, token: str, default: int = 18) -> int:
        """
        Get token decimal precision, falling back to ``default`` when the
        token does not answer.

        Parameters
        ----------
        token : str
            Token address
        default : int
            Precision used when the call fails

        Returns
        -------
        int
            Decimal precision
        """
        try:
            return int(await self._contract(token, ERC20_ABI).functions.decimals().call())
        except Exception as e:
            self.logger.warning(f"decimals() failed for {token}, using {default}: {short_reason(e)}")
            return default

    async def get_token_symbol(self, token: str, default: str) -> str:
        """
        Get token symbol, falling back to ``default`` if the call fails.

        Parameters
        ----------
        token : str
            Token address
        default : str
            Symbol used when ``symbol()`` cannot be read

        Returns
        -------
        str
            Token symbol
        """
        try:
            return str(await self._contract(token, ERC20_ABI).functions.symbol().call())
        except Exception as e:
            self.logger.warning(f"symbol() failed for {token}, using {default}: {short_reason(e)}")
            return default

    async def get_allowance(self, token: str, owner: str, spender: str) -> int:
        """
        Get amount ``spender`` may transfer on behalf of ``owner``.

        Parameters
        ----------
        token : str
            Token address
        owner : str
            Token holder
        spender : str
            Approved contract

        Returns
        -------
        int
            Allowance in token base units
        """
        contract = self._contract(token, ERC20_ABI)
        allowance = await contract.functions.allowance(
            self.web3.to_checksum_address(owner),
            self.web3.to_checksum_address(spender)
        ).call()
        return int(allowance)

    async def approve(
        self,
        wallet: WalletEntity,
        token: str,
        spender: str,
        amount: int
    ) -> TransactionReceiptEntity:
        """
        Approve ``spender`` for exactly ``amount``.

        Parameters
        ----------
        wallet : WalletEntity
            Token owner signing the approval
        token : str
            Token address
        spender : str
            Contract allowed to pull the tokens
        amount : int
            Allowance in base units

        Returns
        -------
        TransactionReceiptEntity
            Mined approval receipt
        """
        contract = self._contract(token, ERC20_ABI)
        function = contract.functions.approve(self.web3.to_checksum_address(spender), amount)
        return await self._send_transaction(wallet, function)

    async def deposit(
        self,
        wallet: WalletEntity,
        contract_address: str,
        token: str,
        amount: int
    ) -> TransactionReceiptEntity:
        """
        Call ``deposit(token, amount)`` on the deposit contract.

        Parameters
        ----------
        wallet : WalletEntity
            Depositing wallet
        contract_address : str
            Deposit contract
        token : str
            Deposited token address
        amount : int
            Amount in base units

        Returns
        -------
        TransactionReceiptEntity
            Mined deposit receipt
        """
        contract = self._contract(contract_address, DEPOSIT_ABI)
        function = contract.functions.deposit(self.web3.to_checksum_address(token), amount)
        return await self._send_transaction(wallet, function)

    async def withdraw(
        self,
        wallet: WalletEntity,
        contract_address: str,
        amount: int,
        asset_out: str
    ) -> TransactionReceiptEntity:
        """
        Call ``withdraw(amount, asset_out)`` on the withdraw contract.

        Parameters
        ----------
        wallet : WalletEntity
            Withdrawing wallet
        contract_address : str
            Withdraw contract
        amount : int
            Derivative token amount in base units
        asset_out : str
            Asset the request is paid out in

        Returns
        -------
        TransactionReceiptEntity
            Mined withdraw receipt
        """
        contract = self._contract(contract_address, WITHDRAW_ABI)
        function = contract.functions.withdraw(amount, self.web3.to_checksum_address(asset_out))
        return await self._send_transaction(wallet, function)

    async def claim(
        self,
        wallet: WalletEntity,
        contract_address: str,
        index: int
    ) -> TransactionReceiptEntity:
        """
        Call ``claim(index, wallet)`` on the withdraw contract.

        Parameters
        ----------
        wallet : WalletEntity
            Claiming wallet, also the request owner
        contract_address : str
            Withdraw contract
        index : int
            Withdrawal request index

        Returns
        -------
        TransactionReceiptEntity
            Mined claim receipt
        """
        contract = self._contract(contract_address, WITHDRAW_ABI)
        function = contract.functions.claim(index, wallet.address)
        return await self._send_transaction(wallet, function)

    async def _send_transaction(self, wallet: WalletEntity, function) -> TransactionReceiptEntity:
        """
        Sign, send and wait for a contract call.

        Gas and fee fields are filled in by ``build_transaction``; a call
        that would revert already fails during gas estimation.

        Parameters
        ----------
        wallet : WalletEntity
            Signing wallet
        function : AsyncContractFunction
            Bound contract function

        Returns
        -------
        TransactionReceiptEntity
            Receipt of the mined transaction

        Raises
        ------
        SubmissionFailedException
            If the transaction could not be built or sent
        TransactionRevertedException
            If the transaction was mined with a failed status
        """
        try:
            nonce = await self.web3.eth.get_transaction_count(wallet.address, "pending")
            tx = await function.build_transaction({"from": wallet.address, "nonce": nonce})
            signed = wallet.account.sign_transaction(tx)
            tx_hash = await self.web3.eth.send_raw_transaction(signed.raw_transaction)
        except (Web3Exception, aiohttp.ClientError, ValueError) as e:
            raise SubmissionFailedException(short_reason(e)) from e

        self.logger.debug(f"Sent {self.web3.to_hex(tx_hash)}, waiting for receipt")
        receipt = await self.web3.eth.wait_for_transaction_receipt(
            tx_hash, timeout=self.receipt_timeout
        )

        result = TransactionReceiptEntity(
            transaction_hash=self.web3.to_hex(receipt["transactionHash"]),
            block_number=receipt["blockNumber"],
            status=receipt["status"]
        )
        if result.status != 1:
            raise TransactionRevertedException(
                f"Transaction {result.transaction_hash} reverted in block {result.block_number}"
            )
        return result
