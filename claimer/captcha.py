"""A client for solving reCAPTCHA v3 challenges with a CAPTCHA solving service."""

from __future__ import annotations

import asyncio
import json
import logging
from json import JSONDecodeError
from typing import Any, Awaitable, Callable, Dict

import aiohttp

from .constants import CAPTCHA_TASK_TYPES
from .errors import CaptchaError, CaptchaTimeoutError
from .utils import CaptchaSolverConfig, TaskId, redact_token

logger = logging.getLogger(__name__)


class CaptchaSolver:
    """
    A class for solving reCAPTCHA v3 challenges using a CAPTCHA solving service.

    Parameters
    ----------
    session : aiohttp.ClientSession
        The session to send requests with.
    config : CaptchaSolverConfig
        The configuration for the CAPTCHA solving service.
    website_url : str
        The URL of the page the reCAPTCHA is on.
    site_key : str
        The reCAPTCHA site key of the page.
    sleep : Callable[[float], Awaitable[None]], optional
        The coroutine function used to wait between polls, by default asyncio.sleep.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        config: CaptchaSolverConfig,
        *,
        website_url: str,
        site_key: str,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._session = session
        self._config = config
        self._website_url = website_url
        self._site_key = site_key
        self._sleep = sleep

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(api_domain={self._config.api_domain!r}, "
            f"website_url={self._website_url!r}, "
            f"site_key={self._site_key!r})"
        )

    def _task_json(self) -> Dict[str, Any]:
        task: Dict[str, Any] = {
            "type": CAPTCHA_TASK_TYPES[self._config.api_domain],
            "websiteURL": self._website_url,
            "websiteKey": self._site_key,
            "minScore": self._config.min_score,
        }

        if self._config.page_action is not None:
            task["pageAction"] = self._config.page_action

        if self._config.is_enterprise:
            task["isEnterprise"] = True

        return task

    async def _post(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._session.post(
            f"https://{self._config.api_domain}/{method}",
            json={"clientKey": self._config.api_key, **payload},
        )

        try:
            response_json = json.loads(await response.text())
        except JSONDecodeError as err:
            raise CaptchaError from err

        if not isinstance(response_json, dict):
            raise CaptchaError(
                "Unexpected response from the CAPTCHA solving service: "
                f"{response_json!r}"
            )

        if response_json["errorId"] != 0:
            raise CaptchaError(response_json.get("errorDescription"))

        return response_json

    async def create_task(self) -> TaskId:
        """
        Create a reCAPTCHA v3 task with the CAPTCHA solving service.

        Returns
        -------
        TaskId
            The ID of the created task.

        Raises
        ------
        CaptchaError
            If the CAPTCHA solving service returns an error.
        """
        task_json = await self._post("createTask", {"task": self._task_json()})
        return task_json["taskId"]

    async def get_task_result(self, task_id: TaskId) -> str:
        """
        Poll the CAPTCHA solving service until a task is solved.

        Parameters
        ----------
        task_id : TaskId
            The ID of the task to get the result of.

        Returns
        -------
        str
            The reCAPTCHA token.

        Raises
        ------
        CaptchaError
            If the CAPTCHA solving service returns an error.
        CaptchaTimeoutError
            If a poll timeout is configured and the task is not solved in time.
        """
        loop = asyncio.get_running_loop()
        deadline = (
            None
            if self._config.poll_timeout is None
            else loop.time() + self._config.poll_timeout
        )

        while True:
            task_result_json = await self._post("getTaskResult", {"taskId": task_id})

            if task_result_json["status"] == "ready":
                break

            delay = self._config.poll_interval

            if deadline is not None:
                remaining = deadline - loop.time()

                if remaining <= 0:
                    raise CaptchaTimeoutError(task_id, self._config.poll_timeout)

                delay = min(delay, remaining)

            logger.info("CAPTCHA not ready yet, retrying in %.1f seconds...", delay)
            await self._sleep(delay)

        return task_result_json["solution"]["gRecaptchaResponse"]

    async def solve(self) -> str:
        """
        Create a reCAPTCHA v3 task and wait for its token.

        Returns
        -------
        str
            The reCAPTCHA token.

        Raises
        ------
        CaptchaError
            If the CAPTCHA solving service returns an error.
        """
        logger.info("Creating reCAPTCHA v3 task...")
        task_id = await self.create_task()
        logger.info("Task created with ID %s, polling for the solution...", task_id)

        token = await self.get_task_result(task_id)
        logger.info("CAPTCHA solved, received token %s", redact_token(token))
        return token
