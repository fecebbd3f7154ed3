"""DOM mailbox bridge.

The host places function-call records under a single anchor element of the
embedded document; script code in the embedded runtime polls the anchor,
runs the named function and may answer through a result record.
"""

from jscall.bridge.anchor import count_anchors, find_anchor
from jscall.bridge.document import (
    DocumentProvider,
    EmbeddingDocumentProvider,
    FileDocumentProvider,
    StaticDocumentProvider,
    get_document,
    serialize_document,
)
from jscall.bridge.glue import collect_function_call, place_function_call
from jscall.bridge.mailbox import Mailbox
from jscall.bridge.protocol import (
    AnchorAmbiguous,
    AnchorNotFound,
    AnchorQueryFailed,
    AnchorUnavailable,
    CallDirection,
    CallRecord,
    DocumentUnavailable,
    MailboxError,
    MailboxTags,
    PlacementStatus,
    RecordAmbiguous,
    RecordMalformed,
    RecordMisplaced,
    ResultChannelDisabled,
)
from jscall.bridge.records import build_element, decode_element
from jscall.bridge.session import MailboxSession, WrongThreadError

__all__ = [
    # Documents
    "DocumentProvider",
    "EmbeddingDocumentProvider",
    "FileDocumentProvider",
    "StaticDocumentProvider",
    "get_document",
    "serialize_document",
    # Anchor
    "count_anchors",
    "find_anchor",
    # Records
    "CallDirection",
    "CallRecord",
    "MailboxTags",
    "build_element",
    "decode_element",
    # Mailbox
    "Mailbox",
    "MailboxSession",
    "WrongThreadError",
    # Entry points
    "place_function_call",
    "collect_function_call",
    # Status and errors
    "PlacementStatus",
    "MailboxError",
    "DocumentUnavailable",
    "AnchorQueryFailed",
    "AnchorNotFound",
    "AnchorAmbiguous",
    "AnchorUnavailable",
    "ResultChannelDisabled",
    "RecordAmbiguous",
    "RecordMisplaced",
    "RecordMalformed",
]
