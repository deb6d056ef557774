import os
from collections.abc import Mapping
from dotenv import dotenv_values

from core.exceptions import ConfigurationException

PRIVATE_KEY_PREFIX = "PRIVATE_KEY_"


def _key_order(name: str) -> int:
    suffix = name[len(PRIVATE_KEY_PREFIX):]
    return int(suffix) if suffix.isdigit() else 0


def load_private_keys(environ: Mapping[str, str | None]) -> list[str]:
    """
    Collect ``PRIVATE_KEY_<n>`` entries ordered by their numeric suffix.

    Entries with a non-numeric suffix sort as ``0``; empty values are
    dropped.

    Parameters
    ----------
    environ : Mapping[str, str | None]
        Environment-like mapping to scan

    Returns
    -------
    list[str]
        Private keys in ascending suffix order

    Raises
    ------
    ConfigurationException
        If no private key is configured
    """
    names = sorted(
        (name for name in environ if name.upper().startswith(PRIVATE_KEY_PREFIX)),
        key=_key_order
    )
    keys = [environ[name].strip() for name in names if environ[name] and environ[name].strip()]

    if not keys:
        raise ConfigurationException(f"No {PRIVATE_KEY_PREFIX}* found in environment or .env")
    return keys


def read_key_environment(env_file: str | None) -> dict[str, str | None]:
    """
    Merge the dotenv file with the process environment.

    Process variables win over the file, the same precedence
    pydantic-settings applies to ``Settings``.

    Parameters
    ----------
    env_file : str | None
        Path to the dotenv file

    Returns
    -------
    dict[str, str | None]
        Merged variables
    """
    merged: dict[str, str | None] = {}
    if env_file and os.path.exists(env_file):
        merged.update(dotenv_values(env_file))
    merged.update(os.environ)
    return merged
