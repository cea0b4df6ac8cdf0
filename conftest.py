import asyncio

import pytest

VALID_KEY = "AIzaSyTest0123456789abcdefghijklmnopq"


class StubGenerator:
    """Records calls and returns a canned reply (or raises a canned error).

    `reply` may be a string or a callable taking the instruction, for tests
    that need the answer to depend on the request.
    """

    def __init__(self, reply="", error: Exception | None = None, delay: float = 0.0):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.calls: list[tuple] = []  # (credential, instruction, schema)

    async def generate(self, credential, instruction, schema):
        self.calls.append((credential, instruction, schema))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply(instruction) if callable(self.reply) else self.reply


@pytest.fixture(autouse=True)
def api_key(monkeypatch):
    """Every test starts with a valid key in the environment; remove it with monkeypatch.delenv."""
    monkeypatch.setenv("GEMINI_API_KEY", VALID_KEY)
    return VALID_KEY


@pytest.fixture
def stub():
    return StubGenerator
