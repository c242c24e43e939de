"""
Unit Tests for Prototype Normalization

These tests validate the structural mapping from upstream records to the
canonical shape. No network or fetcher is involved; records come from
fixtures in conftest.py.

Test Organization:
- TestNormalizePrototype: happy-path field mapping
- TestDefaults: default values for missing optional fields
- TestTimestampFallback: unparseable timestamps keep the upstream value
- TestPurity: input is never mutated, outputs never share lists
"""

import copy
import logging

import pytest

from prototype_cache.normalizer import normalize_prototype, normalize_prototypes
from prototype_cache.normalizer.normalize import (
    FLAG_DEFAULTS,
    LIST_FIELDS,
    TEXT_DEFAULTS,
    TIMESTAMP_FIELDS,
)


# ============================================================================
# Field Mapping Tests
# ============================================================================

class TestNormalizePrototype:
    """Tests for normalize_prototype with a fully populated record"""

    def test_list_fields_are_split(self, sample_upstream_prototype):
        normalized = normalize_prototype(sample_upstream_prototype)

        assert normalized["users"] == ["alice", "bob"]
        assert normalized["tags"] == ["IoT", "Arduino", "Sensor"]
        assert normalized["materials"] == ["ESP32", "Servo"]
        assert normalized["events"] == ["Hackathon 2024"]
        assert normalized["awards"] == []

    def test_timestamps_are_converted_to_utc(self, sample_upstream_prototype):
        normalized = normalize_prototype(sample_upstream_prototype)

        assert normalized["createDate"] == "2024-01-15T03:34:56.000Z"
        assert normalized["updateDate"] == "2024-02-01T00:00:00.000Z"
        assert normalized["releaseDate"] == "2024-01-15T15:00:00.000Z"

    def test_passthrough_fields_copied_as_is(self, sample_upstream_prototype):
        normalized = normalize_prototype(sample_upstream_prototype)

        for field_name in (
            "id", "prototypeNm", "status", "createId", "updateId", "mainUrl",
            "officialLink", "viewCount", "goodCount", "commentCount", "uuid",
            "nid", "slideMode",
        ):
            assert normalized[field_name] == sample_upstream_prototype[field_name]

    def test_present_flags_are_kept(self, sample_upstream_prototype):
        normalized = normalize_prototype(sample_upstream_prototype)

        assert normalized["releaseFlg"] == 2
        assert normalized["licenseType"] == 1
        assert normalized["thanksFlg"] == 1
        assert normalized["summary"] == "Waters itself when the soil gets dry."
        assert normalized["teamNm"] == "Green Thumbs"

    def test_types_are_not_coerced(self):
        """Pass-through fields keep whatever type upstream sent"""
        normalized = normalize_prototype({"id": "12", "viewCount": "many", "status": None})

        assert normalized["id"] == "12"
        assert normalized["viewCount"] == "many"
        assert normalized["status"] is None

    def test_every_list_field_is_a_list(self, sample_upstream_prototype):
        normalized = normalize_prototype(sample_upstream_prototype)
        for field_name in LIST_FIELDS:
            assert isinstance(normalized[field_name], list)


# ============================================================================
# Default Value Tests
# ============================================================================

class TestDefaults:
    """Missing optional fields receive their defaults"""

    def test_minimal_record(self):
        normalized = normalize_prototype({"id": 1, "prototypeNm": "Bare"})

        for field_name, default in TEXT_DEFAULTS.items():
            assert normalized[field_name] == default
        for field_name, default in FLAG_DEFAULTS.items():
            assert normalized[field_name] == default
        for field_name in LIST_FIELDS:
            assert normalized[field_name] == []
        for field_name in TIMESTAMP_FIELDS:
            assert normalized[field_name] is None

    def test_default_values(self):
        normalized = normalize_prototype({"id": 1})

        assert normalized["releaseFlg"] == 2
        assert normalized["revision"] == 0
        assert normalized["licenseType"] == 1
        assert normalized["thanksFlg"] == 0

    def test_none_values_are_defaulted(self):
        normalized = normalize_prototype({
            "id": 1,
            "summary": None,
            "releaseFlg": None,
            "licenseType": None,
        })

        assert normalized["summary"] == ""
        assert normalized["releaseFlg"] == 2
        assert normalized["licenseType"] == 1

    def test_explicit_zero_is_not_replaced(self):
        """Each flag is defaulted independently and 0 is a real value"""
        normalized = normalize_prototype({"id": 1, "licenseType": 0, "releaseFlg": 1})

        assert normalized["licenseType"] == 0
        assert normalized["releaseFlg"] == 1
        assert normalized["thanksFlg"] == 0

    def test_empty_string_text_is_kept(self):
        normalized = normalize_prototype({"id": 1, "freeComment": ""})
        assert normalized["freeComment"] == ""


# ============================================================================
# Timestamp Fallback Tests
# ============================================================================

class TestTimestampFallback:
    """Unparseable timestamps keep their upstream value"""

    @pytest.mark.parametrize("field_name", TIMESTAMP_FIELDS)
    def test_garbage_string_is_kept(self, field_name):
        normalized = normalize_prototype({"id": 9, field_name: "yesterday"})
        assert normalized[field_name] == "yesterday"

    def test_warning_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="prototype_cache.normalizer.normalize"):
            normalize_prototype({"id": 9, "createDate": "yesterday"})

        records = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(records) == 1
        assert records[0].field == "createDate"
        assert records[0].value == "yesterday"
        assert records[0].prototype_id == 9

    def test_empty_string_kept_without_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="prototype_cache.normalizer.normalize"):
            normalized = normalize_prototype({"id": 9, "releaseDate": ""})

        assert normalized["releaseDate"] == ""
        assert not [r for r in caplog.records if r.levelno == logging.WARNING]

    def test_non_string_timestamp_kept(self):
        normalized = normalize_prototype({"id": 9, "updateDate": 1700000000})
        assert normalized["updateDate"] == 1700000000


# ============================================================================
# Purity Tests
# ============================================================================

class TestPurity:
    """Normalization never mutates input and never shares state"""

    def test_input_not_mutated(self, sample_upstream_prototype):
        before = copy.deepcopy(sample_upstream_prototype)
        normalize_prototype(sample_upstream_prototype)
        assert sample_upstream_prototype == before

    def test_returns_new_dict(self, sample_upstream_prototype):
        normalized = normalize_prototype(sample_upstream_prototype)
        assert normalized is not sample_upstream_prototype

    def test_list_values_not_shared_between_calls(self, sample_upstream_prototype):
        first = normalize_prototype(sample_upstream_prototype)
        second = normalize_prototype(sample_upstream_prototype)

        assert first == second
        for field_name in LIST_FIELDS:
            assert first[field_name] is not second[field_name]

        first["tags"].append("Mutated")
        assert "Mutated" not in second["tags"]

    def test_deterministic(self, sample_upstream_prototype):
        results = [normalize_prototype(sample_upstream_prototype) for _ in range(3)]
        assert results[0] == results[1] == results[2]


def test_normalize_prototypes_preserves_order(sample_upstream_batch):
    normalized = normalize_prototypes(sample_upstream_batch)

    assert [p["id"] for p in normalized] == [1, 2, 3]
    assert normalized[1]["users"] == ["bob", "carol"]
    assert normalized[2]["createDate"] == "2024-03-03T01:00:00.000Z"


def test_normalize_prototypes_empty():
    assert normalize_prototypes([]) == []


pytestmark = pytest.mark.unit
