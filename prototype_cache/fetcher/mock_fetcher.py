"""Mock Fetcher for Testing.

This fetcher simulates the upstream prototype API. It doesn't make real HTTP
requests, but returns records in the upstream encoding (pipe-delimited lists,
local timestamps) so the whole normalization path is exercised.
"""

import asyncio
from typing import Any, Optional

from ..types import FetchParams, UpstreamPrototype
from .base import Fetcher, FetchResult


class MockFetcher(Fetcher):
    """Mock fetcher that returns fake prototypes.

    This fetcher is useful for:
    - Unit testing without hitting the real API
    - Demonstrating how to implement Fetcher
    - Testing coalescing and failure handling in the repository

    Example:
        fetcher = MockFetcher(num_records=50)
        result = await fetcher.fetch_records({"offset": 0, "limit": 10})
        assert result.ok and len(result.data) == 10
    """

    def __init__(
        self,
        num_records: int = 100,
        delay_seconds: float = 0.0,
        fail_on_attempt: int = 0,
        failure: Optional[BaseException] = None,
    ):
        """Initialize the mock fetcher.

        Args:
            num_records: Total number of fake records available
            delay_seconds: Simulated network latency per call
            fail_on_attempt: If > 0, fail on this attempt number
            failure: Exception to raise on the failing attempt; when omitted an
                `ok=False` result with status 503 is returned instead
        """
        super().__init__(source_name="mock_api")
        self.num_records = num_records
        self.delay_seconds = delay_seconds
        self.fail_on_attempt = fail_on_attempt
        self.failure = failure
        self.attempt_count = 0
        self.received_params: list[FetchParams] = []

    async def fetch_records(self, params: FetchParams) -> FetchResult:
        """Return a page of fake prototypes.

        `record_id`, when given, narrows the page to that single record.
        """
        self.attempt_count += 1
        self.received_params.append(dict(params))

        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)

        if self.fail_on_attempt > 0 and self.attempt_count == self.fail_on_attempt:
            if self.failure is not None:
                raise self.failure
            return FetchResult.failure(503, "Simulated upstream failure")

        record_id = params.get("record_id")
        if record_id is not None:
            records = [self._generate_fake_prototype(record_id)] if 0 < record_id <= self.num_records else []
            return FetchResult.success(records)

        offset = params.get("offset", 0)
        limit = params.get("limit", 10)
        start_idx = max(offset, 0)
        end_idx = min(start_idx + max(limit, 0), self.num_records)

        records = [self._generate_fake_prototype(i + 1) for i in range(start_idx, end_idx)]
        return FetchResult.success(records)

    def _generate_fake_prototype(self, prototype_id: int) -> UpstreamPrototype:
        """Generate a fake upstream record.

        Args:
            prototype_id: Record id (1-based)

        Returns:
            Dictionary in the upstream encoding
        """
        names = [
            "Smart Plant Pot",
            "Gesture Lamp",
            "Cat Feeder Bot",
            "Pocket Synth",
            "Weather Mirror",
        ]
        tags = ["IoT", "Arduino", "M5Stack", "Raspberry Pi", "AI", "3D Printer"]
        materials = ["ESP32", "Servo", "LED", "Acrylic"]

        # Use modulo to cycle through options
        name = names[prototype_id % len(names)]
        first_tag = tags[prototype_id % len(tags)]
        second_tag = tags[(prototype_id * 3) % len(tags)]
        tag_string = first_tag if first_tag == second_tag else f"{first_tag}| {second_tag}"

        record: dict[str, Any] = {
            "id": prototype_id,
            "prototypeNm": f"{name} #{prototype_id}",
            "summary": f"{name} built for a weekend hackathon.",
            "status": (prototype_id % 4) + 1,
            "releaseFlg": 2,
            "createDate": f"2024-{(prototype_id % 12) + 1:02d}-15 12:00:00.0",
            "updateDate": f"2024-{(prototype_id % 12) + 1:02d}-20 18:30:00.0",
            "releaseDate": f"2024-{(prototype_id % 12) + 1:02d}-16 09:00:00.0",
            "users": f"maker{prototype_id}|maker{prototype_id % 7}",
            "teamNm": f"Team {prototype_id % 5}",
            "tags": tag_string,
            "materials": "|".join(materials[: (prototype_id % len(materials)) + 1]),
            "events": "",
            "awards": None,
            "mainUrl": f"https://example.com/images/{prototype_id}.png",
            "viewCount": prototype_id * 10,
            "goodCount": prototype_id % 13,
            "commentCount": prototype_id % 3,
            "licenseType": 1,
            "thanksFlg": 1,
        }
        return record
