"""Record shapes shared across the prototype cache.

Upstream payloads are loosely typed: every field may be missing or null, list
fields arrive as pipe-delimited strings and timestamps arrive in the upstream
region's local time. `UpstreamPrototype` only names the fields the normalizer
reads; anything else in the payload is ignored.
"""

from typing import Any, Optional, TypedDict


class UpstreamPrototype(TypedDict, total=False):
    """Raw prototype record as returned by the upstream API."""

    id: int

    # Editorial information
    createDate: Optional[str]
    updateDate: Optional[str]
    releaseDate: Optional[str]
    createId: Optional[int]
    updateId: Optional[int]
    releaseFlg: Optional[int]

    # Basic information
    status: Optional[int]
    prototypeNm: Optional[str]
    summary: Optional[str]
    freeComment: Optional[str]
    systemDescription: Optional[str]

    # Pipe-delimited lists
    users: Optional[str]
    teamNm: Optional[str]
    tags: Optional[str]
    materials: Optional[str]
    events: Optional[str]
    awards: Optional[str]

    # URLs
    officialLink: Optional[str]
    videoUrl: Optional[str]
    mainUrl: Optional[str]
    relatedLink: Optional[str]
    relatedLink2: Optional[str]
    relatedLink3: Optional[str]
    relatedLink4: Optional[str]
    relatedLink5: Optional[str]

    # Counters
    viewCount: Optional[int]
    goodCount: Optional[int]
    commentCount: Optional[int]

    # Others
    uuid: Optional[str]
    nid: Optional[str]
    revision: Optional[int]
    licenseType: Optional[int]
    thanksFlg: Optional[int]
    slideMode: Optional[int]


# Canonical records are plain dicts keyed by the upstream field names.
NormalizedPrototype = dict[str, Any]


class FetchParams(TypedDict, total=False):
    """Parameters forwarded to the fetcher for one batch."""

    offset: int
    limit: int
    record_id: int


DEFAULT_FETCH_PARAMS: FetchParams = {"offset": 0, "limit": 10}


def merge_fetch_params(params: Optional[FetchParams] = None) -> FetchParams:
    """Return a new params dict with defaults filled in for missing keys."""
    merged: FetchParams = {**DEFAULT_FETCH_PARAMS}
    if params:
        merged.update({key: value for key, value in params.items() if value is not None})
    return merged


__all__ = [
    "UpstreamPrototype",
    "NormalizedPrototype",
    "FetchParams",
    "DEFAULT_FETCH_PARAMS",
    "merge_fetch_params",
]
