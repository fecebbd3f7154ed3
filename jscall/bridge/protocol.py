"""
Mailbox protocol definitions.

Status codes, error types and the call record shared by both directions
of the DOM mailbox channel:

    <jscall>
      <infunction call="NAME" returnto="TOKEN" args="TEXT"/>   host -> embedded
      <outfunction call="NAME" returnto="TOKEN" args="TEXT"/>  embedded -> host
    </jscall>
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Optional


# Attribute names, in the order they are assigned on a new record
ATTR_CALL = "call"
ATTR_RETURNTO = "returnto"
ATTR_ARGS = "args"
ATTRIBUTE_ORDER = (ATTR_CALL, ATTR_RETURNTO, ATTR_ARGS)

DEFAULT_ANCHOR_TAG = "jscall"
DEFAULT_REQUEST_TAG = "infunction"
DEFAULT_RESULT_TAG = "outfunction"


class PlacementStatus(IntEnum):
    """Status codes returned by the placement entry point."""

    SUCCESS = 0
    DOCUMENT_UNAVAILABLE = 1
    ANCHOR_QUERY_FAILED = 2
    ANCHOR_CARDINALITY = 3
    ANCHOR_ITEM_FAILED = 4
    ELEMENT_CREATION_FAILED = 5
    ATTRIBUTE_ASSIGNMENT_FAILED = 6
    NODE_CAST_FAILED = 7
    APPEND_FAILED = 8

    @property
    def description(self) -> str:
        return _STATUS_DESCRIPTIONS[self]


_STATUS_DESCRIPTIONS = {
    PlacementStatus.SUCCESS: "Call record placed",
    PlacementStatus.DOCUMENT_UNAVAILABLE: "Document could not be resolved",
    PlacementStatus.ANCHOR_QUERY_FAILED: "Failed to query anchor candidates",
    PlacementStatus.ANCHOR_CARDINALITY: "Document must contain exactly one anchor",
    PlacementStatus.ANCHOR_ITEM_FAILED: "Failed to fetch the anchor element",
    PlacementStatus.ELEMENT_CREATION_FAILED: "Call record element could not be created",
    PlacementStatus.ATTRIBUTE_ASSIGNMENT_FAILED: "Call record attribute could not be set",
    PlacementStatus.NODE_CAST_FAILED: "Created element is not a usable node",
    PlacementStatus.APPEND_FAILED: "Call record could not be appended to the anchor",
}


class MailboxError(Exception):
    """Mailbox protocol failure carrying a placement status code."""

    status: Optional[PlacementStatus] = None

    def __init__(
        self,
        message: str,
        status: Optional[PlacementStatus] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = PlacementStatus(status)
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary for JSON output."""
        error: dict[str, Any] = {
            "status": int(self.status) if self.status is not None else None,
            "message": self.message,
        }
        if self.details:
            error["details"] = self.details
        return error

    @classmethod
    def element_creation_failed(cls, tag: str, cause: Optional[BaseException] = None) -> "MailboxError":
        """Create an element creation error."""
        details = {"tag": tag}
        if cause is not None:
            details["cause"] = str(cause)
        return cls(
            f"Could not create <{tag}> element",
            PlacementStatus.ELEMENT_CREATION_FAILED,
            details,
        )

    @classmethod
    def attribute_assignment_failed(cls, name: str, cause: BaseException) -> "MailboxError":
        """Create an attribute assignment error."""
        return cls(
            f"Could not set attribute '{name}'",
            PlacementStatus.ATTRIBUTE_ASSIGNMENT_FAILED,
            {"attribute": name, "cause": str(cause)},
        )

    @classmethod
    def node_cast_failed(cls, obj: Any) -> "MailboxError":
        """Create an error for an element that does not behave as a node."""
        return cls(
            "Created element is not a DOM node",
            PlacementStatus.NODE_CAST_FAILED,
            {"type": type(obj).__name__},
        )

    @classmethod
    def append_failed(cls, cause: BaseException) -> "MailboxError":
        """Create an append error."""
        return cls(
            "Could not append call record to anchor",
            PlacementStatus.APPEND_FAILED,
            {"cause": str(cause)},
        )


class DocumentUnavailable(MailboxError):
    """The embedding has no document to offer (yet)."""

    status = PlacementStatus.DOCUMENT_UNAVAILABLE


class AnchorQueryFailed(MailboxError):
    """The document refused the anchor tag query."""

    status = PlacementStatus.ANCHOR_QUERY_FAILED


class AnchorNotFound(MailboxError):
    """No anchor element exists in the document."""

    status = PlacementStatus.ANCHOR_CARDINALITY


class AnchorAmbiguous(MailboxError):
    """More than one anchor element exists in the document."""

    status = PlacementStatus.ANCHOR_CARDINALITY


class AnchorUnavailable(MailboxError):
    """The single anchor match could not be fetched."""

    status = PlacementStatus.ANCHOR_ITEM_FAILED


class ResultChannelDisabled(MailboxError):
    """The embedded -> host channel is switched off in configuration."""


class RecordAmbiguous(MailboxError):
    """More than one result record is waiting in the document."""


class RecordMisplaced(MailboxError):
    """A result record was found outside the anchor or is not an element."""


class RecordMalformed(MailboxError):
    """A result record is missing its call attribute."""


class CallDirection(Enum):
    """Which side of the bridge wrote a call record."""

    REQUEST = "request"  # host -> embedded script
    RESULT = "result"  # embedded script -> host (deprecated channel)


@dataclass(frozen=True)
class MailboxTags:
    """Element tag names used by the mailbox."""

    anchor: str = DEFAULT_ANCHOR_TAG
    request: str = DEFAULT_REQUEST_TAG
    result: str = DEFAULT_RESULT_TAG

    def for_direction(self, direction: CallDirection) -> str:
        """Get the record tag for a direction."""
        if direction is CallDirection.REQUEST:
            return self.request
        return self.result


@dataclass(frozen=True)
class CallRecord:
    """One pending or completed function call."""

    call: str
    args: str = ""
    returnto: str = ""
    direction: CallDirection = CallDirection.REQUEST

    def attributes(self) -> list[tuple[str, str]]:
        """Attribute name/value pairs in assignment order."""
        values = {ATTR_CALL: self.call, ATTR_RETURNTO: self.returnto, ATTR_ARGS: self.args}
        return [(name, values[name]) for name in ATTRIBUTE_ORDER]

    def to_dict(self) -> dict[str, str]:
        """Convert to a plain dictionary."""
        return {
            "direction": self.direction.value,
            ATTR_CALL: self.call,
            ATTR_RETURNTO: self.returnto,
            ATTR_ARGS: self.args,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CallRecord":
        """Create from a dictionary."""
        return cls(
            call=data[ATTR_CALL],
            args=data.get(ATTR_ARGS, ""),
            returnto=data.get(ATTR_RETURNTO, ""),
            direction=CallDirection(data.get("direction", CallDirection.REQUEST.value)),
        )
