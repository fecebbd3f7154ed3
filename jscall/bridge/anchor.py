"""
Anchor discovery.

The mailbox has no addressing scheme beyond "the one anchor element", so a
document with zero or several anchors cannot carry calls at all.
"""

from __future__ import annotations

import logging
from typing import Any

from .protocol import (
    DEFAULT_ANCHOR_TAG,
    AnchorAmbiguous,
    AnchorNotFound,
    AnchorQueryFailed,
    AnchorUnavailable,
)

logger = logging.getLogger(__name__)


def _query(document: Any, tag: str) -> Any:
    try:
        nodes = document.getElementsByTagName(tag)
    except Exception as e:
        raise AnchorQueryFailed(
            f"Query for <{tag}> failed",
            details={"tag": tag, "cause": str(e)},
        ) from e

    if nodes is None:
        raise AnchorQueryFailed(f"Query for <{tag}> returned nothing", details={"tag": tag})
    return nodes


def _length(nodes: Any, tag: str) -> int:
    try:
        return int(nodes.length)
    except Exception as e:
        raise AnchorQueryFailed(
            f"Could not count <{tag}> candidates",
            details={"tag": tag, "cause": str(e)},
        ) from e


def count_anchors(document: Any, tag: str = DEFAULT_ANCHOR_TAG) -> int:
    """
    Count anchor candidates without enforcing cardinality.

    Raises:
        AnchorQueryFailed: If the document cannot be queried
    """
    return _length(_query(document, tag), tag)


def find_anchor(document: Any, tag: str = DEFAULT_ANCHOR_TAG) -> Any:
    """
    Find the single anchor element of the mailbox.

    Args:
        document: The live document
        tag: Anchor tag name

    Returns:
        The anchor element

    Raises:
        AnchorQueryFailed: If the tag query fails
        AnchorNotFound: If the document has no anchor
        AnchorAmbiguous: If the document has more than one anchor
        AnchorUnavailable: If the single match cannot be fetched
    """
    nodes = _query(document, tag)
    length = _length(nodes, tag)

    if length == 0:
        raise AnchorNotFound(f"No <{tag}> anchor in document", details={"tag": tag})
    if length > 1:
        raise AnchorAmbiguous(
            f"Found {length} <{tag}> anchors, expected exactly one",
            details={"tag": tag, "count": length},
        )

    try:
        anchor = nodes.item(0)
    except Exception as e:
        raise AnchorUnavailable(
            f"Could not fetch <{tag}> anchor",
            details={"tag": tag, "cause": str(e)},
        ) from e

    if anchor is None:
        raise AnchorUnavailable(f"Could not fetch <{tag}> anchor", details={"tag": tag})

    logger.debug(f"Found <{tag}> anchor")
    return anchor
