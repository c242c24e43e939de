"""
Pytest configuration and shared fixtures

This file contains test fixtures that can be used across all tests.
Fixtures are reusable components that set up test preconditions.

Learn more: https://docs.pytest.org/en/stable/fixture.html
"""

import asyncio

import pytest

from prototype_cache.fetcher import Fetcher, FetchResult


@pytest.fixture(scope="function")
def sample_upstream_prototype() -> dict:
    """
    Provide a sample upstream prototype record for testing.

    This fixture returns a record in the upstream encoding (pipe-delimited
    lists, local timestamps) without needing to call the external API.

    Scope: function (created fresh for each test)

    Returns:
        dict: Sample upstream record
    """
    return {
        "id": 7,
        "prototypeNm": "Smart Plant Pot",
        "summary": "Waters itself when the soil gets dry.",
        "status": 3,
        "releaseFlg": 2,
        "createDate": "2024-01-15 12:34:56.0",
        "updateDate": "2024-02-01 09:00:00.0",
        "releaseDate": "2024-01-16 00:00:00.0",
        "createId": 101,
        "updateId": 102,
        "users": "alice| bob ",
        "teamNm": "Green Thumbs",
        "tags": "IoT|Arduino||Sensor|",
        "materials": "ESP32|Servo",
        "events": "Hackathon 2024",
        "awards": "",
        "mainUrl": "https://example.com/images/7.png",
        "officialLink": "https://example.com/plant-pot",
        "viewCount": 120,
        "goodCount": 8,
        "commentCount": 2,
        "uuid": "c0ffee00-0000-0000-0000-000000000007",
        "nid": "7",
        "licenseType": 1,
        "thanksFlg": 1,
        "slideMode": 0,
    }


@pytest.fixture(scope="function")
def sample_upstream_batch() -> list[dict]:
    """
    Provide a batch of upstream records with ids 1, 2 and 3.

    Useful for testing snapshot replacement, reads and analysis.

    Scope: function (created fresh for each test)

    Returns:
        list[dict]: List of upstream records
    """
    return [
        {
            "id": 1,
            "prototypeNm": "Gesture Lamp",
            "createDate": "2024-03-01 10:00:00.0",
            "tags": "IoT|AI",
            "users": "alice",
            "viewCount": 10,
            "goodCount": 1,
            "commentCount": 0,
        },
        {
            "id": 2,
            "prototypeNm": "Cat Feeder Bot",
            "createDate": "2024-03-02 10:00:00.0",
            "tags": "IoT|Raspberry Pi",
            "users": "bob|carol",
            "viewCount": 30,
            "goodCount": 5,
            "commentCount": 2,
        },
        {
            "id": 3,
            "prototypeNm": "Pocket Synth",
            "createDate": "2024-03-03 10:00:00.0",
            "tags": "Music|IoT",
            "users": "alice|dave",
            "viewCount": 20,
            "goodCount": 3,
            "commentCount": 1,
        },
    ]


class GatedFetcher(Fetcher):
    """
    Fetcher whose calls block until the test opens the gate.

    Each call pops the next queued outcome: a list of upstream records, a
    FetchResult, or an exception to raise. `started` is set as soon as a
    call is waiting on the gate.
    """

    def __init__(self, outcomes=None):
        super().__init__(source_name="gated")
        self.outcomes = list(outcomes or [])
        self.calls = []
        self.gate = asyncio.Event()
        self.started = asyncio.Event()

    async def fetch_records(self, params):
        self.calls.append(dict(params))
        self.started.set()
        await self.gate.wait()

        outcome = self.outcomes.pop(0) if self.outcomes else []
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, FetchResult):
            return outcome
        return FetchResult.success(outcome)


@pytest.fixture(scope="function")
def gated_fetcher() -> GatedFetcher:
    """
    Provide a fetcher that waits for `fetcher.gate.set()`.

    Lets tests hold a fetch in flight while more callers arrive.

    Scope: function (created fresh for each test)
    """
    return GatedFetcher()


# Mark tests based on their type for selective running
def pytest_configure(config):
    """
    Register custom pytest markers.

    This allows us to run specific test categories:
    - pytest -m unit        (run only unit tests)
    - pytest -m "not slow"  (skip slow tests)
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test (isolated, fast)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running (>1 second)"
    )
