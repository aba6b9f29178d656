"""
A module for loading signing configuration.

The configuration is read from a YAML file and validated with Pydantic.

Classes:
- SigningConfig: chain id, optional private key and log level used when
  preparing and signing transactions.

Usage:
- `SigningConfig.from_yaml("signing.yaml")` loads and validates a file.
- `PrivateKeySigner.from_config(config)` builds a signer from it.
"""

from pathlib import Path
from typing import Literal, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    PositiveInt,
    SecretStr,
    ValidationError,
    field_validator,
)

from .logger import setup_logger

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class SigningConfig(BaseModel):
    """
    Represents the signing configuration.

    Attributes:
    - chain_id (int): The chain transactions are prepared for.
    - private_key (SecretStr): Optional `0x` prefixed private key. It is
      masked when the configuration is printed.
    - log_level (str): Level applied to the `onemoney` loggers, one of the
      standard level names in any case.

    """

    chain_id: PositiveInt
    private_key: Optional[SecretStr] = None
    log_level: LogLevel = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value: object) -> object:
        """
        Accept level names in any case.
        """
        if isinstance(value, str):
            return value.upper()
        return value

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "SigningConfig":
        """
        Load and validate a configuration file.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(
                f"The configuration file '{path}' does not exist."
            )

        with path.open("r") as file:
            config_data = yaml.safe_load(file) or {}
            try:
                return cls(**config_data)
            except ValidationError as e:
                raise ValueError(f"Invalid configuration: {e}") from e

    def configure_logging(self) -> None:
        """
        Apply the packaged logging configuration at `log_level`.
        """
        setup_logger("onemoney", self.log_level)
