"""
Call record encoding and decoding.

A call record is a childless element whose three string attributes carry
the call. Values are stored verbatim; escaping is the serializer's job.
"""

from __future__ import annotations

from typing import Any
from xml.dom import Node

from .protocol import (
    ATTR_ARGS,
    ATTR_CALL,
    ATTR_RETURNTO,
    CallDirection,
    CallRecord,
    MailboxError,
    RecordMalformed,
    RecordMisplaced,
)


def build_element(document: Any, record: CallRecord, tag: str) -> Any:
    """
    Build a detached element for a call record.

    The element is not attached to the tree; the caller appends it once
    this returns, so a failure here never leaves a half-written record
    behind.

    Raises:
        MailboxError: With status 5, 6 or 7 depending on the failing step
    """
    try:
        element = document.createElement(tag)
    except Exception as e:
        raise MailboxError.element_creation_failed(tag, e) from e
    if element is None:
        raise MailboxError.element_creation_failed(tag)

    for name, value in record.attributes():
        try:
            element.setAttribute(name, value)
        except Exception as e:
            raise MailboxError.attribute_assignment_failed(name, e) from e

    if not callable(getattr(element, "appendChild", None)) or getattr(element, "nodeType", None) is None:
        raise MailboxError.node_cast_failed(element)

    return element


def decode_element(node: Any, anchor_tag: str, direction: CallDirection) -> CallRecord:
    """
    Read a call record from a node found in the tree.

    The node must sit directly under the anchor and be an element with a
    call attribute. Anything else is treated as spoofed or misplaced.
    """
    parent = node.parentNode
    if parent is None or parent.nodeName != anchor_tag:
        raise RecordMisplaced(
            f"Record is not a child of <{anchor_tag}>",
            details={"parent": parent.nodeName if parent is not None else None},
        )

    if node.nodeType != Node.ELEMENT_NODE:
        raise RecordMisplaced("Record is not an element", details={"node_type": node.nodeType})

    if not node.hasAttribute(ATTR_CALL):
        raise RecordMalformed(f"Record has no '{ATTR_CALL}' attribute")

    return CallRecord(
        call=node.getAttribute(ATTR_CALL),
        args=node.getAttribute(ATTR_ARGS),
        returnto=node.getAttribute(ATTR_RETURNTO),
        direction=direction,
    )
