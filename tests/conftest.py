import pytest

from alice_bridge.config import Settings
from alice_bridge.providers import PROVIDERS
from tests.fakes import FakeClock, FakeLLMClient


@pytest.fixture
def deepseek():
    return PROVIDERS["deepseek"]


@pytest.fixture
def settings(deepseek):
    return Settings(profile=deepseek, api_key="sk-test-0123456789", model=deepseek.model)


@pytest.fixture
def fake_client():
    return FakeLLMClient()


@pytest.fixture
def clock():
    return FakeClock()
