"""Configuration classes and helpers for the faucet claimer."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Annotated, Any, Dict, Mapping, Optional, Union

import annotated_types
import toml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .constants import BROWSER_HEADERS, CAPTCHA_API_KEY_ENV, CAPTCHA_TASK_TYPES
from .errors import ConfigError

TaskId = Union[int, str]
ClaimResult = Any

Seconds = Annotated[float, annotated_types.Ge(0)]


def redact_token(token: str, visible: int = 8) -> str:
    """
    Redact a reCAPTCHA token so that it can be logged.

    Parameters
    ----------
    token : str
        The token to redact.
    visible : int, optional
        The number of leading characters to keep, by default 8.

    Returns
    -------
    str
        The redacted token.
    """
    return f"{token[:visible]}... ({len(token)} chars)"


class CaptchaSolverConfig(BaseModel):
    """A class for representing the configuration for a CAPTCHA solving service."""

    model_config = ConfigDict(frozen=True)

    api_domain: str = "api.2captcha.com"
    api_key: str
    min_score: Annotated[float, annotated_types.Ge(0.1), annotated_types.Le(0.9)] = 0.9
    page_action: Optional[str] = None
    is_enterprise: bool = False
    poll_interval: Seconds = 5
    poll_timeout: Optional[Seconds] = None

    @field_validator("api_key")
    @classmethod
    def _check_api_key(cls, api_key: str) -> str:
        if not api_key.strip():
            raise ValueError("an API key for the CAPTCHA solving service is required")

        return api_key.strip()

    @field_validator("api_domain")
    @classmethod
    def _check_api_domain(cls, api_domain: str) -> str:
        if api_domain not in CAPTCHA_TASK_TYPES:
            raise ValueError(
                f"unsupported CAPTCHA solving service '{api_domain}', "
                f"expected one of {', '.join(CAPTCHA_TASK_TYPES)}"
            )

        return api_domain


class FaucetConfig(BaseModel):
    """A class for representing the configuration for the faucet being claimed."""

    model_config = ConfigDict(frozen=True)

    website_url: str
    site_key: str
    claim_url: str
    address: str
    visitor_id: str
    headers: Dict[str, str] = BROWSER_HEADERS

    @field_validator("website_url", "site_key", "claim_url", "address", "visitor_id")
    @classmethod
    def _check_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")

        return value.strip()

    @property
    def request_headers(self) -> Dict[str, str]:
        """The headers sent with a claim request."""
        return {"Referer": self.website_url, **self.headers}


class RetryConfig(BaseModel):
    """A class for representing the retry policy of the claim loop."""

    model_config = ConfigDict(frozen=True)

    delay: Seconds = 3
    backoff: Annotated[float, annotated_types.Ge(1)] = 1
    max_delay: Seconds = 60
    max_attempts: Optional[Annotated[int, annotated_types.Ge(1)]] = None


class Settings(BaseModel):
    """A class for representing the settings of the program."""

    model_config = ConfigDict(frozen=True)

    captcha_solver: CaptchaSolverConfig
    faucet: FaucetConfig
    retry: RetryConfig = RetryConfig()
    request_timeout: Optional[Annotated[float, annotated_types.Gt(0)]] = 30
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, log_level: str) -> str:
        if not isinstance(logging.getLevelName(log_level.upper()), int):
            raise ValueError(f"unknown log level '{log_level}'")

        return log_level.upper()

    @classmethod
    def from_dict(
        cls, config: Mapping[str, Any], environ: Optional[Mapping[str, str]] = None
    ) -> Settings:
        """
        Create an instance of Settings from a configuration mapping.

        The CAPTCHA solving service API key is taken from the
        ``CAPTCHA_API_KEY`` environment variable when it is set.

        Parameters
        ----------
        config : Mapping[str, Any]
            The configuration to create the Settings instance from.
        environ : Optional[Mapping[str, str]], optional
            The environment to read overrides from, by default os.environ.

        Returns
        -------
        Settings
            An instance of Settings created from the configuration.

        Raises
        ------
        ConfigError
            If the configuration is invalid.
        """
        environ = os.environ if environ is None else environ
        config = dict(config)
        captcha_solver = config.get("captcha_solver", {})

        if not isinstance(captcha_solver, Mapping):
            raise ConfigError(
                "Invalid configuration: captcha_solver must be a table, "
                f"got {captcha_solver!r}"
            )

        captcha_solver = dict(captcha_solver)

        if environ.get(CAPTCHA_API_KEY_ENV):
            captcha_solver["api_key"] = environ[CAPTCHA_API_KEY_ENV]

        config["captcha_solver"] = captcha_solver

        try:
            return cls.model_validate(config)
        except ValidationError as err:
            raise ConfigError(f"Invalid configuration: {err}") from err

    @classmethod
    def from_toml(
        cls, path: Union[Path, str], environ: Optional[Mapping[str, str]] = None
    ) -> Settings:
        """
        Create an instance of Settings from a TOML file.

        Parameters
        ----------
        path : Union[Path, str]
            The path to the TOML file.
        environ : Optional[Mapping[str, str]], optional
            The environment to read overrides from, by default os.environ.

        Returns
        -------
        Settings
            An instance of Settings created from the TOML file.

        Raises
        ------
        ConfigError
            If the file cannot be read or the configuration is invalid.
        """
        try:
            config = toml.load(path)
        except FileNotFoundError as err:
            raise ConfigError(f"The config file '{path}' was not found.") from err
        except OSError as err:
            raise ConfigError(
                f"The config file '{path}' could not be read: {err}"
            ) from err
        except toml.TomlDecodeError as err:
            raise ConfigError(
                f"The config file '{path}' is not valid TOML: {err}"
            ) from err

        return cls.from_dict(config, environ)
