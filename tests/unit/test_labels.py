"""Tests for code-field display labels."""

import pytest

from prototype_cache.common import (
    UNKNOWN_LABEL,
    license_type_label,
    release_flag_label,
    status_label,
    thanks_flag_label,
)


@pytest.mark.parametrize("code,expected", [
    (1, "アイデア"),
    (2, "開発中"),
    (3, "完成"),
    (4, "供養"),
    (99, "99"),
])
def test_status_label(code, expected):
    assert status_label(code) == expected


@pytest.mark.parametrize("code,expected", [
    (1, "下書き保存"),
    (2, "一般公開"),
    (3, "限定共有"),
    (0, "0"),
])
def test_release_flag_label(code, expected):
    assert release_flag_label(code) == expected


def test_license_type_label():
    assert license_type_label(0) == "なし"
    assert license_type_label(1) == "表示(CC:BY)"
    assert license_type_label(7) == "7"


def test_thanks_flag_label():
    assert thanks_flag_label(1) == "初回表示済"
    assert thanks_flag_label(None) == UNKNOWN_LABEL == "不明"
    assert thanks_flag_label(0) == "0"


pytestmark = pytest.mark.unit
