"""
The anchor's child list used as a transport.

Appending a record is sending, removing one is receiving. A Mailbox is
bound to one document and one anchor; cardinality is checked when the
mailbox is opened rather than on every call.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional
from xml.dom import Node

from .anchor import find_anchor
from .document import get_document
from .protocol import (
    AnchorUnavailable,
    CallDirection,
    CallRecord,
    MailboxError,
    MailboxTags,
    RecordAmbiguous,
    RecordMalformed,
    ResultChannelDisabled,
)
from .records import build_element, decode_element

if TYPE_CHECKING:
    from jscall.config import MailboxConfig

logger = logging.getLogger(__name__)


class Mailbox:
    """
    Call mailbox rooted at a single anchor element.

    Example:
        mailbox = Mailbox.open(provider)
        mailbox.place_call("add", "1,2", "req-1")
    """

    def __init__(
        self,
        document: Any,
        anchor: Any,
        tags: Optional[MailboxTags] = None,
        result_channel_enabled: bool = False,
    ):
        self._document = document
        self._anchor = anchor
        self._tags = tags or MailboxTags()
        self._result_channel_enabled = result_channel_enabled

    @classmethod
    def open(cls, source: Any, config: Optional["MailboxConfig"] = None) -> "Mailbox":
        """
        Resolve the document and locate its anchor.

        Args:
            source: A DocumentProvider or a raw embedding handle
            config: Mailbox configuration (defaults if not given)

        Raises:
            DocumentUnavailable: If the document cannot be resolved
            AnchorQueryFailed, AnchorNotFound, AnchorAmbiguous, AnchorUnavailable:
                If the anchor invariant does not hold
        """
        tags = MailboxTags()
        result_channel_enabled = False
        if config is not None:
            tags = MailboxTags(
                anchor=config.anchor_tag,
                request=config.request_tag,
                result=config.result_tag,
            )
            result_channel_enabled = config.result_channel_enabled

        document = get_document(source)
        anchor = find_anchor(document, tags.anchor)
        return cls(document, anchor, tags, result_channel_enabled)

    @property
    def document(self) -> Any:
        return self._document

    @property
    def anchor(self) -> Any:
        return self._anchor

    @property
    def tags(self) -> MailboxTags:
        return self._tags

    @property
    def result_channel_enabled(self) -> bool:
        return self._result_channel_enabled

    def place(self, record: CallRecord) -> Any:
        """
        Append a call record as the last child of the anchor.

        The element is fully built before it is attached. This returns as
        soon as the element is in the tree; it does not wait for anyone
        to consume it.

        Returns:
            The appended element

        Raises:
            ResultChannelDisabled: For a RESULT record while the reverse
                channel is off
            MailboxError: With status 5-8 if building or appending fails
        """
        if record.direction is CallDirection.RESULT:
            self._require_result_channel()

        tag = self._tags.for_direction(record.direction)
        element = build_element(self._document, record, tag)

        try:
            self._anchor.appendChild(element)
        except Exception as e:
            raise MailboxError.append_failed(e) from e

        logger.debug(f"Placed <{tag} call={record.call!r} returnto={record.returnto!r}>")
        return element

    def place_call(self, call: str, args: str, returnto: str) -> CallRecord:
        """Place a host -> embedded function call request."""
        record = CallRecord(call=call, args=args, returnto=returnto)
        self.place(record)
        return record

    def pending(self, direction: CallDirection = CallDirection.REQUEST) -> list[CallRecord]:
        """
        List records of one direction under the anchor, in document order.

        Records are left in place. Records without a call attribute are
        skipped with a warning.
        """
        tag = self._tags.for_direction(direction)
        records = []
        for node in self._anchor.childNodes:
            if node.nodeType != Node.ELEMENT_NODE or node.nodeName != tag:
                continue
            try:
                records.append(decode_element(node, self._tags.anchor, direction))
            except RecordMalformed as e:
                logger.warning(f"Skipping <{tag}> record: {e}")
        return records

    def collect(self, direction: CallDirection = CallDirection.RESULT) -> Optional[CallRecord]:
        """
        Read and remove the single waiting record of a direction.

        This is the read half of the reverse channel. It is disabled unless
        the mailbox was opened with the result channel enabled.

        Returns:
            The record, or None if nothing is waiting

        Raises:
            ResultChannelDisabled: If collecting results while the channel is off
            RecordAmbiguous: If more than one record is waiting
            RecordMisplaced: If the record is not an element under the anchor
            RecordMalformed: If the record has no call attribute
        """
        if direction is CallDirection.RESULT:
            self._require_result_channel()

        tag = self._tags.for_direction(direction)
        nodes = self._document.getElementsByTagName(tag)
        if nodes.length == 0:
            return None
        if nodes.length > 1:
            raise RecordAmbiguous(
                f"Found {nodes.length} <{tag}> records, expected one",
                details={"tag": tag, "count": nodes.length},
            )

        node = nodes.item(0)
        record = decode_element(node, self._tags.anchor, direction)
        node.parentNode.removeChild(node)

        logger.debug(f"Collected <{tag} call={record.call!r} returnto={record.returnto!r}>")
        return record

    def revalidate(self) -> None:
        """
        Check that the anchor found at setup is still the document's only anchor.

        Raises:
            AnchorNotFound, AnchorAmbiguous: If the cardinality changed
            AnchorUnavailable: If a different element is now the anchor
        """
        anchor = find_anchor(self._document, self._tags.anchor)
        if anchor is not self._anchor:
            raise AnchorUnavailable(
                f"<{self._tags.anchor}> anchor was replaced since the mailbox was opened",
                details={"tag": self._tags.anchor},
            )

    def _require_result_channel(self) -> None:
        if not self._result_channel_enabled:
            raise ResultChannelDisabled(
                "Result channel is disabled; enable mailbox.result_channel_enabled to use it",
                details={"tag": self._tags.result},
            )
