import logging
import os
import pytest
from unittest.mock import AsyncMock
from eth_account import Account


# Set test environment variables before imports
os.environ['ENV_FILE'] = '.env.test'
os.environ['LOG_LEVEL'] = 'DEBUG'

from core.environment.config import Settings  # noqa: E402
from restake.entities import TransactionReceiptEntity, WalletEntity  # noqa: E402

FIRST_KEY = "0x" + "11" * 32
SECOND_KEY = "0x" + "22" * 32


def make_receipt(number: int, status: int = 1) -> TransactionReceiptEntity:
    """
    Build a receipt with a hash derived from ``number``.

    Parameters
    ----------
    number : int
        Distinguishing number
    status : int
        Receipt status

    Returns
    -------
    TransactionReceiptEntity
        Receipt entity
    """
    return TransactionReceiptEntity(
        transaction_hash="0x" + f"{number:064x}",
        block_number=1000 + number,
        status=status
    )


@pytest.fixture
def receipt_factory():
    return make_receipt


@pytest.fixture
def settings():
    """Settings with defaults only, no env file."""
    return Settings(_env_file=None)


@pytest.fixture
def logger():
    """Logger captured by caplog through the root logger."""
    test_logger = logging.getLogger("tests.restake")
    test_logger.setLevel(logging.DEBUG)
    return test_logger


@pytest.fixture
def wallet():
    return WalletEntity.from_account(Account.from_key(FIRST_KEY))


@pytest.fixture
def second_wallet():
    return WalletEntity.from_account(Account.from_key(SECOND_KEY))


@pytest.fixture
def chain():
    """
    Mock chain client holding 1 WETH with no allowance.

    Returns
    -------
    AsyncMock
        Chain client double
    """
    mock = AsyncMock()
    mock.get_native_balance = AsyncMock(return_value=2 * 10 ** 18)
    mock.get_token_balance = AsyncMock(return_value=10 ** 18)
    mock.get_token_decimals = AsyncMock(return_value=18)
    mock.get_token_symbol = AsyncMock(return_value="exETH")
    mock.get_allowance = AsyncMock(return_value=0)
    mock.approve = AsyncMock(return_value=make_receipt(1))
    mock.deposit = AsyncMock(return_value=make_receipt(2))
    mock.withdraw = AsyncMock(return_value=make_receipt(3))
    mock.claim = AsyncMock(return_value=make_receipt(4))
    return mock
