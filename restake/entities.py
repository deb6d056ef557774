from eth_account.signers.local import LocalAccount
from pydantic import BaseModel, ConfigDict

from restake.units import to_base_units, to_decimal_string


class WalletEntity(BaseModel):
    """
    Entity representing a key-derived signing wallet.

    Attributes
    ----------
    address : str
        Checksum address
    account : LocalAccount
        Local account used to sign transactions
    """
    address: str
    account: LocalAccount

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @classmethod
    def from_account(cls, account: LocalAccount) -> "WalletEntity":
        return cls(address=account.address, account=account)

    def __repr__(self) -> str:
        return f"WalletEntity(address={self.address!r})"

    __str__ = __repr__


class AmountEntity(BaseModel):
    """
    Entity representing a token amount in both of its forms.

    Attributes
    ----------
    text : str
        Canonical decimal string
    base_units : int
        Amount scaled by the token precision
    decimals : int
        Token decimal precision
    """
    text: str
    base_units: int
    decimals: int

    model_config = ConfigDict(frozen=True)

    @classmethod
    def parse(cls, text: str, decimals: int) -> "AmountEntity":
        """
        Build amount from a human-entered decimal string.

        Parameters
        ----------
        text : str
            Decimal amount
        decimals : int
            Token decimal precision

        Returns
        -------
        AmountEntity
            Parsed amount
        """
        base_units = to_base_units(text, decimals)
        return cls(
            text=to_decimal_string(base_units, decimals),
            base_units=base_units,
            decimals=decimals
        )

    @classmethod
    def from_base_units(cls, base_units: int, decimals: int) -> "AmountEntity":
        return cls(
            text=to_decimal_string(base_units, decimals),
            base_units=base_units,
            decimals=decimals
        )


class TransactionReceiptEntity(BaseModel):
    """
    Entity representing a mined transaction.

    Attributes
    ----------
    transaction_hash : str
        0x-prefixed transaction hash
    block_number : int
        Block the transaction was included in
    status : int
        Execution status, 1 on success
    """
    transaction_hash: str
    block_number: int
    status: int

    model_config = ConfigDict(from_attributes=True)


class ClaimAttemptEntity(BaseModel):
    """
    Entity representing one claim attempt at a request index.

    Attributes
    ----------
    index : int
        Withdrawal request index tried
    succeeded : bool
        Whether the claim was mined successfully
    transaction_hash : str | None
        Hash of the claim transaction on success
    reason : str | None
        Failure reason otherwise
    """
    index: int
    succeeded: bool
    transaction_hash: str | None = None
    reason: str | None = None


class OperationReportEntity(BaseModel):
    """
    Entity summarizing a deposit or withdraw run for one wallet.

    Attributes
    ----------
    wallet_address : str
        Wallet the run was performed for
    operation : str
        Operation name
    receipts : list[TransactionReceiptEntity]
        Receipts of the operation transactions, approvals excluded
    skipped : int
        Iterations skipped for insufficient balance
    """
    wallet_address: str
    operation: str
    receipts: list[TransactionReceiptEntity] = []
    skipped: int = 0


class WalletBalancesEntity(BaseModel):
    """
    Entity representing the balances shown above the menu.

    Attributes
    ----------
    wallet_address : str
        Wallet address
    native_balance : str
        Gas token balance in ether
    token_symbol : str
        Derivative token symbol
    token_balance : str
        Derivative token balance
    """
    wallet_address: str
    native_balance: str
    token_symbol: str
    token_balance: str
