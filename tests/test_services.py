import pytest
from unittest.mock import AsyncMock, MagicMock
from hexbytes import HexBytes
from web3 import Web3

from core.exceptions import SubmissionFailedException, TransactionRevertedException
from restake.services import Web3Service

TX_HASH = HexBytes("0x" + "ab" * 32)
WITHDRAW_CONTRACT = "0x3Cc99498dea7a164C9d6D02C7710FF63f36A60ed"


def unsigned_transaction(nonce: int) -> dict:
    return {
        "to": WITHDRAW_CONTRACT,
        "value": 0,
        "gas": 100_000,
        "maxFeePerGas": 2_000_000_000,
        "maxPriorityFeePerGas": 1_000_000_000,
        "nonce": nonce,
        "chainId": 17000,
        "data": "0x",
    }


@pytest.fixture
def web3():
    """
    Mock AsyncWeb3 client with a pending nonce of 7 and a mined receipt.

    Returns
    -------
    MagicMock
        Web3 client double
    """
    mock = MagicMock()
    mock.to_checksum_address.side_effect = lambda address: address
    mock.to_hex.side_effect = Web3.to_hex
    mock.eth.get_transaction_count = AsyncMock(return_value=7)
    mock.eth.send_raw_transaction = AsyncMock(return_value=TX_HASH)
    mock.eth.wait_for_transaction_receipt = AsyncMock(return_value={
        "transactionHash": TX_HASH,
        "blockNumber": 4242,
        "status": 1,
    })
    return mock


@pytest.fixture
def contract_function(web3):
    function = MagicMock()
    function.build_transaction = AsyncMock(side_effect=lambda params: unsigned_transaction(params["nonce"]))
    web3.eth.contract.return_value.functions.claim.return_value = function
    return function


@pytest.fixture
def service(web3, logger):
    return Web3Service(web3=web3, logger=logger, receipt_timeout=30)


class TestWeb3Service:
    """
    Unit tests for the web3-backed chain client.

    These tests mock the RPC side only; signing uses a real local account.
    """

    @pytest.mark.asyncio
    async def test_claim_signs_and_waits(self, service, web3, contract_function, wallet):
        """
        Test that a write is built with the pending nonce, sent raw and
        waited for.

        Parameters
        ----------
        service : Web3Service
            Service under test
        web3 : MagicMock
            Web3 client double
        contract_function : MagicMock
            Bound contract function double
        wallet : WalletEntity
            Signing wallet
        """
        receipt = await service.claim(wallet, WITHDRAW_CONTRACT, 3)

        web3.eth.contract.return_value.functions.claim.assert_called_once_with(3, wallet.address)
        web3.eth.get_transaction_count.assert_awaited_once_with(wallet.address, "pending")
        contract_function.build_transaction.assert_awaited_once_with({"from": wallet.address, "nonce": 7})
        raw = web3.eth.send_raw_transaction.await_args.args[0]
        assert raw == wallet.account.sign_transaction(unsigned_transaction(7)).raw_transaction
        web3.eth.wait_for_transaction_receipt.assert_awaited_once_with(TX_HASH, timeout=30)
        assert receipt.transaction_hash == "0x" + "ab" * 32
        assert receipt.block_number == 4242

    @pytest.mark.asyncio
    async def test_reverted_receipt_raises(self, service, web3, contract_function, wallet):
        web3.eth.wait_for_transaction_receipt.return_value = {
            "transactionHash": TX_HASH,
            "blockNumber": 4243,
            "status": 0,
        }

        with pytest.raises(TransactionRevertedException, match="reverted in block 4243"):
            await service.claim(wallet, WITHDRAW_CONTRACT, 0)

    @pytest.mark.asyncio
    async def test_build_failure_is_submission_failure(self, service, web3, contract_function, wallet):
        contract_function.build_transaction.side_effect = ValueError("execution reverted")

        with pytest.raises(SubmissionFailedException, match="execution reverted"):
            await service.claim(wallet, WITHDRAW_CONTRACT, 0)

        web3.eth.send_raw_transaction.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_decimals_fallback(self, service, web3):
        web3.eth.contract.return_value.functions.decimals.return_value.call = AsyncMock(
            side_effect=ValueError("no data")
        )

        assert await service.get_token_decimals("0xDD1ec7e2c5408aB7199302d481a1b77FdA0267A3") == 18

    @pytest.mark.asyncio
    async def test_allowance_read(self, service, web3, wallet):
        allowance = web3.eth.contract.return_value.functions.allowance
        allowance.return_value.call = AsyncMock(return_value=123)

        result = await service.get_allowance(
            "0x94373a4919B3240D86eA41593D5eBa789FEF3848", wallet.address, WITHDRAW_CONTRACT
        )

        assert result == 123
        allowance.assert_called_once_with(wallet.address, WITHDRAW_CONTRACT)
