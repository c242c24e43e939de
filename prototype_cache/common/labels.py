"""
Display labels for numeric code fields.

The upstream API reports status and flag fields as small integers. These
helpers map the known codes to the labels shown on the upstream site and
fall back to the number itself for codes we have not seen.
"""

from typing import Optional

STATUS_LABELS = {
    1: "アイデア",  # idea
    2: "開発中",  # in development
    3: "完成",  # completed
    4: "供養",  # retired
}

RELEASE_FLAG_LABELS = {
    1: "下書き保存",  # draft
    2: "一般公開",  # public
    3: "限定共有",  # limited sharing
}

LICENSE_TYPE_LABELS = {
    0: "なし",  # none
    1: "表示(CC:BY)",
}

THANKS_FLAG_LABELS = {
    1: "初回表示済",
}

UNKNOWN_LABEL = "不明"


def status_label(status: int) -> str:
    """
    Examples:
        >>> status_label(3)
        '完成'
        >>> status_label(99)
        '99'
    """
    return STATUS_LABELS.get(status, str(status))


def release_flag_label(release_flag: int) -> str:
    return RELEASE_FLAG_LABELS.get(release_flag, str(release_flag))


def license_type_label(license_type: int) -> str:
    return LICENSE_TYPE_LABELS.get(license_type, str(license_type))


def thanks_flag_label(thanks_flag: Optional[int]) -> str:
    """Older records may have no thanks flag at all; those map to UNKNOWN_LABEL."""
    if thanks_flag is None:
        return UNKNOWN_LABEL
    return THANKS_FLAG_LABELS.get(thanks_flag, str(thanks_flag))
