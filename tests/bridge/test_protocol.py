"""Tests for mailbox protocol definitions."""

import pytest

from jscall.bridge.protocol import (
    ATTRIBUTE_ORDER,
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
    RecordMalformed,
    ResultChannelDisabled,
)


class TestPlacementStatus:
    """Test placement status codes."""

    def test_codes_are_stable(self) -> None:
        """Status values form the contiguous range 0-8."""
        assert [int(s) for s in PlacementStatus] == list(range(9))

    def test_success_is_zero(self) -> None:
        assert PlacementStatus.SUCCESS == 0

    def test_every_status_has_description(self) -> None:
        for status in PlacementStatus:
            assert status.description

    def test_cardinality_description(self) -> None:
        assert "exactly one" in PlacementStatus.ANCHOR_CARDINALITY.description


class TestMailboxError:
    """Test MailboxError and its factories."""

    def test_basic_error(self) -> None:
        error = MailboxError("Something broke")
        assert error.message == "Something broke"
        assert error.status is None
        assert error.details == {}
        assert str(error) == "Something broke"

    def test_explicit_status(self) -> None:
        error = MailboxError("Boom", status=8)
        assert error.status is PlacementStatus.APPEND_FAILED

    def test_str_with_details(self) -> None:
        error = MailboxError("Boom", details={"tag": "jscall"})
        assert str(error) == "Boom (tag=jscall)"

    def test_to_dict(self) -> None:
        error = MailboxError("Boom", PlacementStatus.APPEND_FAILED, {"cause": "nope"})
        assert error.to_dict() == {
            "status": 8,
            "message": "Boom",
            "details": {"cause": "nope"},
        }

    def test_to_dict_without_status(self) -> None:
        assert MailboxError("Boom").to_dict() == {"status": None, "message": "Boom"}

    def test_element_creation_failed(self) -> None:
        error = MailboxError.element_creation_failed("infunction", ValueError("bad"))
        assert error.status is PlacementStatus.ELEMENT_CREATION_FAILED
        assert error.details == {"tag": "infunction", "cause": "bad"}

    def test_element_creation_failed_without_cause(self) -> None:
        error = MailboxError.element_creation_failed("infunction")
        assert error.details == {"tag": "infunction"}

    def test_attribute_assignment_failed(self) -> None:
        error = MailboxError.attribute_assignment_failed("args", ValueError("bad"))
        assert error.status is PlacementStatus.ATTRIBUTE_ASSIGNMENT_FAILED
        assert error.details["attribute"] == "args"

    def test_node_cast_failed(self) -> None:
        error = MailboxError.node_cast_failed(object())
        assert error.status is PlacementStatus.NODE_CAST_FAILED
        assert error.details == {"type": "object"}

    def test_append_failed(self) -> None:
        error = MailboxError.append_failed(RuntimeError("read-only"))
        assert error.status is PlacementStatus.APPEND_FAILED
        assert error.details == {"cause": "read-only"}


class TestErrorStatuses:
    """Each subclass carries its placement status."""

    @pytest.mark.parametrize("error_class,status", [
        (DocumentUnavailable, PlacementStatus.DOCUMENT_UNAVAILABLE),
        (AnchorQueryFailed, PlacementStatus.ANCHOR_QUERY_FAILED),
        (AnchorNotFound, PlacementStatus.ANCHOR_CARDINALITY),
        (AnchorAmbiguous, PlacementStatus.ANCHOR_CARDINALITY),
        (AnchorUnavailable, PlacementStatus.ANCHOR_ITEM_FAILED),
    ])
    def test_subclass_status(self, error_class, status) -> None:
        error = error_class("failed")
        assert error.status is status
        assert isinstance(error, MailboxError)

    def test_channel_errors_have_no_status(self) -> None:
        assert ResultChannelDisabled("off").status is None
        assert RecordMalformed("no call").status is None


class TestMailboxTags:
    """Test MailboxTags."""

    def test_defaults(self) -> None:
        tags = MailboxTags()
        assert tags.anchor == "jscall"
        assert tags.request == "infunction"
        assert tags.result == "outfunction"

    def test_for_direction(self) -> None:
        tags = MailboxTags(request="req", result="res")
        assert tags.for_direction(CallDirection.REQUEST) == "req"
        assert tags.for_direction(CallDirection.RESULT) == "res"


class TestCallRecord:
    """Test CallRecord."""

    def test_defaults(self) -> None:
        record = CallRecord(call="ping")
        assert record.args == ""
        assert record.returnto == ""
        assert record.direction is CallDirection.REQUEST

    def test_attributes_in_assignment_order(self) -> None:
        record = CallRecord(call="add", args="1,2", returnto="req-1")
        assert record.attributes() == [
            ("call", "add"),
            ("returnto", "req-1"),
            ("args", "1,2"),
        ]
        assert tuple(name for name, _ in record.attributes()) == ATTRIBUTE_ORDER

    def test_to_dict(self) -> None:
        record = CallRecord(call="add", args="1,2", returnto="req-1")
        assert record.to_dict() == {
            "direction": "request",
            "call": "add",
            "returnto": "req-1",
            "args": "1,2",
        }

    def test_from_dict(self) -> None:
        record = CallRecord.from_dict({"call": "sum", "returnto": "r", "direction": "result"})
        assert record == CallRecord(call="sum", returnto="r", direction=CallDirection.RESULT)

    def test_is_immutable(self) -> None:
        record = CallRecord(call="add")
        with pytest.raises(AttributeError):
            record.call = "sub"  # type: ignore[misc]
