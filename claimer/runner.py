"""The claim loop tying the CAPTCHA solver and the faucet client together."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

import aiohttp
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    stop_never,
    wait_exponential,
)
from tenacity.wait import wait_base

from .captcha import CaptchaSolver
from .errors import RetryLimitError
from .faucet import FaucetClient
from .utils import ClaimResult, RetryConfig, Settings

logger = logging.getLogger(__name__)


class wait_after_error(wait_base):
    """Wait strategy that only waits after a failed attempt."""

    def __init__(self, wait: wait_base) -> None:
        self.wait = wait

    def __call__(self, retry_state: RetryCallState) -> float:
        if retry_state.outcome is not None and retry_state.outcome.failed:
            return self.wait(retry_state)

        return 0


class ClaimRunner:
    """
    A class for claiming from a faucet until it returns a result.

    Every attempt creates a new CAPTCHA task, so each retry costs a solve.

    Parameters
    ----------
    solver : CaptchaSolver
        The solver used to obtain reCAPTCHA tokens.
    faucet : FaucetClient
        The client used to submit claims.
    retry_config : RetryConfig, optional
        The retry policy, by default a fixed three second wait between
        failed attempts and no attempt limit.
    sleep : Callable[[float], Awaitable[None]], optional
        The coroutine function used to wait between attempts,
        by default asyncio.sleep.
    """

    def __init__(
        self,
        solver: CaptchaSolver,
        faucet: FaucetClient,
        retry_config: Optional[RetryConfig] = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._solver = solver
        self._faucet = faucet
        self._retry_config = retry_config or RetryConfig()
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls, session: aiohttp.ClientSession, settings: Settings
    ) -> ClaimRunner:
        """
        Create an instance of ClaimRunner from the program settings.

        Parameters
        ----------
        session : aiohttp.ClientSession
            The session shared by the solver and the faucet client.
        settings : Settings
            The settings to create the ClaimRunner instance from.

        Returns
        -------
        ClaimRunner
            An instance of ClaimRunner created from the settings.
        """
        solver = CaptchaSolver(
            session,
            settings.captcha_solver,
            website_url=settings.faucet.website_url,
            site_key=settings.faucet.site_key,
        )

        return cls(solver, FaucetClient(session, settings.faucet), settings.retry)

    async def _pause(self, seconds: float) -> None:
        if seconds > 0:
            await self._sleep(seconds)

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        if retry_state.outcome is not None and retry_state.outcome.failed:
            logger.error(
                "Claim attempt %d failed: %s, retrying in %.1f seconds...",
                retry_state.attempt_number,
                retry_state.outcome.exception(),
                retry_state.next_action.sleep if retry_state.next_action else 0,
            )
        else:
            logger.warning("Claim returned no result, retrying...")

    @staticmethod
    def _give_up(retry_state: RetryCallState) -> None:
        if retry_state.outcome is not None and retry_state.outcome.failed:
            retry_state.outcome.result()

        raise RetryLimitError(retry_state.attempt_number)

    def _retrying(self) -> AsyncRetrying:
        config = self._retry_config

        return AsyncRetrying(
            retry=retry_if_exception_type(Exception)
            | retry_if_result(lambda result: result is None),
            wait=wait_after_error(
                wait_exponential(
                    multiplier=config.delay,
                    exp_base=config.backoff,
                    min=min(config.delay, config.max_delay),
                    max=config.max_delay,
                )
            ),
            stop=(
                stop_never
                if config.max_attempts is None
                else stop_after_attempt(config.max_attempts)
            ),
            sleep=self._pause,
            before_sleep=self._log_retry,
            retry_error_callback=self._give_up,
        )

    async def attempt(self) -> Optional[ClaimResult]:
        """
        Solve a new reCAPTCHA and submit a claim with it.

        Returns
        -------
        Optional[ClaimResult]
            The JSON response of the faucet, or None if the claim should be retried.
        """
        token = await self._solver.solve()
        return await self._faucet.submit(token)

    async def run(self) -> ClaimResult:
        """
        Claim from the faucet, retrying until it returns a result.

        Returns
        -------
        ClaimResult
            The JSON response of the faucet.

        Raises
        ------
        RetryLimitError
            If an attempt limit is configured and the last attempt returned no result.
        Exception
            The error of the last attempt if an attempt limit is configured
            and the last attempt failed.
        """
        result = await self._retrying()(self.attempt)
        logger.info("Claim result: %s", result)
        return result
