from typing import Literal, TypeVar
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.exceptions import InvalidAmountException
from restake.units import to_base_units

RequestT = TypeVar("RequestT", bound=BaseModel)

# Upper bound used for format checks; real precision comes from the token.
MAX_DECIMALS = 77


def parse_count(v: object) -> object:
    """
    Normalize a count answer: empty means 1, anything below 1 becomes 1.

    Parameters
    ----------
    v : object
        Raw answer

    Returns
    -------
    object
        Normalized value for pydantic to validate
    """
    if isinstance(v, str):
        text = v.strip()
        if not text:
            return 1
        if not text.lstrip("-").isdigit():
            raise ValueError(f"Count must be a whole number, got {text!r}")
        v = int(text)
    if isinstance(v, int) and v < 1:
        return 1
    return v


def check_amount_format(v: str) -> str:
    try:
        to_base_units(v, MAX_DECIMALS)
    except InvalidAmountException as e:
        raise ValueError(e.message) from e
    return v.strip()


class DepositRequest(BaseModel):
    """
    Parameters collected for a deposit run.

    Attributes
    ----------
    amount : str
        WETH amount per transaction
    times : int
        Transactions per wallet, at least 1
    mode : Literal["once", "daily"]
        Run once or switch to the daily schedule
    """
    amount: str = Field(..., description="WETH amount per transaction")
    times: int = Field(default=1, ge=1, description="Transactions per wallet")
    mode: Literal["once", "daily"] = Field(default="once")

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: str) -> str:
        return check_amount_format(v)

    @field_validator("times", mode="before")
    @classmethod
    def validate_times(cls, v: object) -> object:
        return parse_count(v)

    @field_validator("mode", mode="before")
    @classmethod
    def validate_mode(cls, v: object) -> object:
        if isinstance(v, str) and v not in ("once", "daily"):
            return "daily" if v.strip().upper() == "S" else "once"
        return v

    model_config = ConfigDict(frozen=True)


class WithdrawRequest(BaseModel):
    """
    Parameters collected for a withdraw run.

    Attributes
    ----------
    amount : str
        exETH amount per transaction
    times : int
        Transactions per wallet, at least 1
    """
    amount: str = Field(..., description="exETH amount per transaction")
    times: int = Field(default=1, ge=1, description="Transactions per wallet")

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: str) -> str:
        return check_amount_format(v)

    @field_validator("times", mode="before")
    @classmethod
    def validate_times(cls, v: object) -> object:
        return parse_count(v)

    model_config = ConfigDict(frozen=True)


class ClaimRequest(BaseModel):
    """
    Parameters collected for a claim run.

    Attributes
    ----------
    attempts : int
        Request indices to try per wallet, starting at 0
    """
    attempts: int = Field(default=1, ge=1, description="Claim attempts per wallet")

    @field_validator("attempts", mode="before")
    @classmethod
    def validate_attempts(cls, v: object) -> object:
        return parse_count(v)

    model_config = ConfigDict(frozen=True)


def parse_request(model: type[RequestT], **data: object) -> RequestT:
    """
    Validate prompt answers into a request schema.

    Parameters
    ----------
    model : type[RequestT]
        Request schema
    **data : object
        Raw answers

    Returns
    -------
    RequestT
        Validated request

    Raises
    ------
    InvalidAmountException
        If any answer fails validation
    """
    try:
        return model(**data)
    except ValidationError as e:
        error = e.errors()[0]
        message = str(error["msg"]).removeprefix("Value error, ")
        raise InvalidAmountException(message) from e
