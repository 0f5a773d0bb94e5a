"""Error classes for the faucet claimer."""

from typing import Optional


class CaptchaError(Exception):
    """
    An exception raised when the CAPTCHA solving service returns an error.

    The service reports failures as a non-zero ``errorId``, and the message carries
    its ``errorDescription``. Also exported as ``ServiceError``.
    """

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or "The CAPTCHA solving service returned an error.")


ServiceError = CaptchaError


class CaptchaTimeoutError(CaptchaError):
    """An exception raised when a CAPTCHA task is not solved in time."""

    def __init__(self, task_id: object, timeout: float) -> None:
        super().__init__(
            f"The CAPTCHA task '{task_id}' was not solved within {timeout} seconds."
        )


class ConfigError(Exception):
    """An exception raised when the configuration is missing or invalid."""


class RetryLimitError(Exception):
    """An exception raised when every claim attempt returned no result."""

    def __init__(self, attempts: int) -> None:
        super().__init__(f"The faucet returned no result after {attempts} attempts.")
