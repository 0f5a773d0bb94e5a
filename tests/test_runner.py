from unittest.mock import AsyncMock

import aiohttp
import pytest

from claimer import (
    CaptchaError,
    CaptchaSolver,
    ClaimRunner,
    FaucetClient,
    RetryConfig,
    RetryLimitError,
    Settings,
)

from .helpers import make_response, make_session, posted_urls

CREATE_TASK_URL = "https://api.2captcha.com/createTask"
GET_TASK_RESULT_URL = "https://api.2captcha.com/getTaskResult"
CLAIM_URL = "https://faucet.example/api/claim"


def task_created(task_id="T1"):
    return make_response({"errorId": 0, "taskId": task_id})


def task_ready(token="tok123"):
    return make_response(
        {"errorId": 0, "status": "ready", "solution": {"gRecaptchaResponse": token}}
    )


def task_failed():
    return make_response({"errorId": 1, "errorDescription": "ERROR_ZERO_BALANCE"})


def make_runner(session, solver_config, faucet_config, retry_config=None):
    sleep = AsyncMock()
    solver = CaptchaSolver(
        session,
        solver_config,
        website_url=faucet_config.website_url,
        site_key=faucet_config.site_key,
        sleep=AsyncMock(),
    )
    runner = ClaimRunner(
        solver, FaucetClient(session, faucet_config), retry_config, sleep=sleep
    )
    return runner, sleep


@pytest.mark.asyncio
async def test_run_stops_after_first_successful_claim(solver_config, faucet_config):
    session = make_session(
        task_created(), task_ready(), make_response({"success": True})
    )
    runner, sleep = make_runner(session, solver_config, faucet_config)

    assert await runner.run() == {"success": True}
    assert posted_urls(session) == [CREATE_TASK_URL, GET_TASK_RESULT_URL, CLAIM_URL]
    assert session.post.call_args.kwargs["json"]["recaptchaToken"] == "tok123"
    sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_run_restarts_immediately_after_gateway_timeout(
    solver_config, faucet_config
):
    session = make_session(
        task_created("T1"),
        task_ready("tok1"),
        make_response(status=504),
        task_created("T2"),
        task_ready("tok2"),
        make_response({"success": True}),
    )
    runner, sleep = make_runner(session, solver_config, faucet_config)

    assert await runner.run() == {"success": True}
    assert posted_urls(session) == [
        CREATE_TASK_URL,
        GET_TASK_RESULT_URL,
        CLAIM_URL,
    ] * 2
    assert session.post.call_args_list[4].kwargs["json"]["taskId"] == "T2"
    assert session.post.call_args.kwargs["json"]["recaptchaToken"] == "tok2"
    sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_run_waits_and_retries_after_error(solver_config, faucet_config):
    session = make_session(
        aiohttp.ClientConnectionError("Connection reset"),
        task_created(),
        task_ready(),
        make_response({"success": True}),
    )
    runner, sleep = make_runner(session, solver_config, faucet_config)

    assert await runner.run() == {"success": True}
    assert posted_urls(session) == [
        CREATE_TASK_URL,
        CREATE_TASK_URL,
        GET_TASK_RESULT_URL,
        CLAIM_URL,
    ]
    assert [call.args for call in sleep.await_args_list] == [(3,)]


@pytest.mark.asyncio
async def test_run_backs_off_between_failures(solver_config, faucet_config):
    session = make_session(
        task_failed(),
        task_failed(),
        task_failed(),
        task_failed(),
        task_created(),
        task_ready(),
        make_response({"success": True}),
    )
    runner, sleep = make_runner(
        session,
        solver_config,
        faucet_config,
        RetryConfig(delay=3, backoff=2, max_delay=20),
    )

    assert await runner.run() == {"success": True}
    assert [call.args for call in sleep.await_args_list] == [(3,), (6,), (12,), (20,)]


@pytest.mark.asyncio
async def test_run_reraises_last_error_when_attempts_exhausted(
    solver_config, faucet_config
):
    session = make_session(task_failed(), task_failed())
    runner, sleep = make_runner(
        session, solver_config, faucet_config, RetryConfig(max_attempts=2)
    )

    with pytest.raises(CaptchaError, match="ERROR_ZERO_BALANCE"):
        await runner.run()

    assert session.post.await_count == 2
    assert sleep.await_count == 1


@pytest.mark.asyncio
async def test_run_raises_when_every_attempt_returns_nothing(
    solver_config, faucet_config
):
    session = make_session(
        task_created("T1"),
        task_ready(),
        make_response(status=504),
        task_created("T2"),
        task_ready(),
        make_response(status=504),
    )
    runner, _ = make_runner(
        session, solver_config, faucet_config, RetryConfig(max_attempts=2)
    )

    with pytest.raises(RetryLimitError, match="2 attempts"):
        await runner.run()


def test_from_settings_builds_clients(solver_config, faucet_config):
    settings = Settings(captcha_solver=solver_config, faucet=faucet_config)
    runner = ClaimRunner.from_settings(make_session(), settings)

    assert "api.2captcha.com" in repr(runner._solver)
    assert faucet_config.claim_url in repr(runner._faucet)


@pytest.mark.asyncio
async def test_run_treats_empty_claim_body_as_error(solver_config, faucet_config):
    session = make_session(
        task_created("T1"),
        task_ready(),
        make_response(status=502, body=""),
        task_created("T2"),
        task_ready(),
        make_response({"success": True}),
    )
    runner, sleep = make_runner(session, solver_config, faucet_config)

    assert await runner.run() == {"success": True}
    assert [call.args for call in sleep.await_args_list] == [(3,)]
