"""Locator classification.

Rules are checked in order and the first match wins. The protocol check
comes first so that ``https://host/a.svg`` is a network image, not a
vector graphic. Matching is case-sensitive and the locator is never
normalized.
"""

from __future__ import annotations

from pixcache.core.models import ResourceKind


NETWORK_PREFIXES = ("http://", "https://")
LOCAL_FILE_PREFIXES = ("/data", "/storage")
VECTOR_SUFFIX = ".svg"
ANIMATION_SUFFIX = ".json"


def classify(locator: str | None) -> ResourceKind:
    """Map a locator to the kind of resource it identifies.

    Args:
        locator: URL or path. ``None`` means no locator was given.

    Returns:
        The ResourceKind for the locator. ``None`` yields UNKNOWN; every
        string, including the empty string, yields one of the other kinds.

    Example:
        >>> classify("https://example.com/image.png")
        <ResourceKind.NETWORK_IMAGE: 'network-image'>
        >>> classify("assets/images/logo.png").value
        'raster-asset'
    """
    if locator is None:
        return ResourceKind.UNKNOWN
    if locator.startswith(NETWORK_PREFIXES):
        return ResourceKind.NETWORK_IMAGE
    if locator.endswith(VECTOR_SUFFIX):
        return ResourceKind.VECTOR_GRAPHIC
    if locator.endswith(ANIMATION_SUFFIX):
        return ResourceKind.ANIMATION
    if locator.startswith(LOCAL_FILE_PREFIXES):
        return ResourceKind.LOCAL_FILE
    return ResourceKind.RASTER_ASSET


def is_network(locator: str | None) -> bool:
    """Return True if the locator must be fetched over the network."""
    return classify(locator) is ResourceKind.NETWORK_IMAGE
