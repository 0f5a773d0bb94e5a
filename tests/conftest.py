import pytest

from claimer import CaptchaSolverConfig, FaucetConfig


@pytest.fixture
def solver_config() -> CaptchaSolverConfig:
    return CaptchaSolverConfig(api_key="test-key", poll_interval=5)


@pytest.fixture
def faucet_config() -> FaucetConfig:
    return FaucetConfig(
        website_url="https://faucet.example/",
        site_key="site-key",
        claim_url="https://faucet.example/api/claim",
        address="0x43cf056c8f9e4ca5ece19831635fc058d57e668e",
        visitor_id="d035256e1b3d22ec26985d9ecb82a393",
    )
