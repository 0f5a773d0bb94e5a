"""A client for submitting claims to a testnet faucet."""

from __future__ import annotations

import json
import logging
from typing import Optional

import aiohttp

from .utils import ClaimResult, FaucetConfig

logger = logging.getLogger(__name__)


class FaucetClient:
    """
    A class for submitting reCAPTCHA protected claims to a testnet faucet.

    Parameters
    ----------
    session : aiohttp.ClientSession
        The session to send requests with.
    config : FaucetConfig
        The configuration for the faucet.
    """

    def __init__(self, session: aiohttp.ClientSession, config: FaucetConfig) -> None:
        self._session = session
        self._config = config

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(claim_url={self._config.claim_url!r}, "
            f"address={self._config.address!r})"
        )

    async def submit(self, recaptcha_token: str) -> Optional[ClaimResult]:
        """
        Submit a claim with a solved reCAPTCHA token.

        Parameters
        ----------
        recaptcha_token : str
            The reCAPTCHA token to submit.

        Returns
        -------
        Optional[ClaimResult]
            The JSON response of the faucet, or None if the faucet timed out
            and the claim should be retried.

        Raises
        ------
        json.JSONDecodeError
            If the response body is not valid JSON, including an empty body.
        """
        logger.info("Submitting claim for %s...", self._config.address)

        response = await self._session.post(
            self._config.claim_url,
            headers=self._config.request_headers,
            json={
                "address": self._config.address,
                "recaptchaToken": recaptcha_token,
                "visitorId": self._config.visitor_id,
            },
            raise_for_status=False,
        )

        if response.status == 504:
            logger.warning("Received 504 Gateway Timeout from the faucet")
            response.release()
            return None

        return json.loads(await response.text())
