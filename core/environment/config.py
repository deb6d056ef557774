import os
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from web3 import Web3


class Settings(BaseSettings):
    """
    Application settings using Pydantic Settings.

    Attributes
    ----------
    rpc_url : str
        Holesky JSON-RPC endpoint
    deposit_contract_address : str
        Contract accepting WETH deposits
    withdraw_contract_address : str
        Contract handling exETH withdrawals and claims
    weth_address : str
        Wrapped ether token
    exeth_address : str
        Derivative token minted on deposit
    claim_delay_minutes : int
        Typical delay before a withdrawal becomes claimable
    schedule_interval_hours : float
        Interval between scheduled deposit runs
    tx_receipt_timeout : float
        Seconds to wait for a transaction to be mined
    log_level : str
        Console log level
    """

    rpc_url: str = "https://ethereum-holesky-rpc.publicnode.com/"

    deposit_contract_address: str = "0x0c6A085e9d17A51DEA2A7e954ACcAb1429213B75"
    withdraw_contract_address: str = "0x3Cc99498dea7a164C9d6D02C7710FF63f36A60ed"
    weth_address: str = "0x94373a4919B3240D86eA41593D5eBa789FEF3848"
    exeth_address: str = "0xDD1ec7e2c5408aB7199302d481a1b77FdA0267A3"

    claim_delay_minutes: int = 25
    schedule_interval_hours: float = 24
    tx_receipt_timeout: float = 120

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=os.getenv("ENV_FILE", ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator(
        "deposit_contract_address",
        "withdraw_contract_address",
        "weth_address",
        "exeth_address"
    )
    @classmethod
    def validate_address(cls, v: str) -> str:
        if not v.startswith('0x') or len(v) != 42:
            raise ValueError('Invalid contract address format')
        return Web3.to_checksum_address(v)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def schedule_interval_seconds(self) -> float:
        """
        Interval between scheduled deposit runs in seconds.

        Returns
        -------
        float
            Interval in seconds
        """
        return self.schedule_interval_hours * 60 * 60

    def get_env_file(self) -> str | None:
        """
        Get the dotenv file the settings were configured with.

        Returns
        -------
        str | None
            Path to the env file
        """
        env_file = self.model_config.get("env_file")
        return str(env_file) if env_file else None
