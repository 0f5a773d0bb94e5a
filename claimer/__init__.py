"""A reCAPTCHA v3 protected testnet faucet claimer."""

from .captcha import CaptchaSolver
from .errors import (
    CaptchaError,
    CaptchaTimeoutError,
    ConfigError,
    RetryLimitError,
    ServiceError,
)
from .faucet import FaucetClient
from .runner import ClaimRunner
from .utils import (
    CaptchaSolverConfig,
    FaucetConfig,
    RetryConfig,
    Settings,
    redact_token,
)

__all__ = [
    "CaptchaError",
    "CaptchaSolver",
    "CaptchaSolverConfig",
    "CaptchaTimeoutError",
    "ClaimRunner",
    "ConfigError",
    "FaucetClient",
    "FaucetConfig",
    "RetryConfig",
    "RetryLimitError",
    "ServiceError",
    "Settings",
    "redact_token",
]
