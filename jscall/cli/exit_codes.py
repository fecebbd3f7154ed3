"""Standard exit codes for the jscall CLI.

Codes 0-8 are the placement status codes of the mailbox protocol, so a
shell script sees the same number a host runtime would. CLI-only
failures start at 10.
"""

from typing import Optional

from jscall.bridge.protocol import PlacementStatus


def _placement_status(code: int) -> Optional[PlacementStatus]:
    try:
        return PlacementStatus(code)
    except ValueError:
        return None


class ExitCode:
    """Standard exit codes for the jscall CLI.

    Placement statuses (0-8):
    - 0: Success
    - 1: Document unavailable
    - 2: Anchor query failed
    - 3: Anchor cardinality is not one
    - 4: Anchor could not be fetched
    - 5: Element creation failed
    - 6: Attribute assignment failed
    - 7: Element is not a usable node
    - 8: Append to anchor failed

    CLI errors (10+):
    - 10: Configuration error
    - 11: Invalid argument
    - 12: Result channel disabled
    - 13: Malformed or misplaced record
    - 14: Nothing to collect
    - 70: Unexpected internal error
    - 130: Cancelled by Ctrl+C (SIGINT)
    """

    SUCCESS = int(PlacementStatus.SUCCESS)

    # Placement statuses
    DOCUMENT_UNAVAILABLE = int(PlacementStatus.DOCUMENT_UNAVAILABLE)
    ANCHOR_QUERY_FAILED = int(PlacementStatus.ANCHOR_QUERY_FAILED)
    ANCHOR_CARDINALITY = int(PlacementStatus.ANCHOR_CARDINALITY)
    ANCHOR_ITEM_FAILED = int(PlacementStatus.ANCHOR_ITEM_FAILED)
    ELEMENT_CREATION_FAILED = int(PlacementStatus.ELEMENT_CREATION_FAILED)
    ATTRIBUTE_ASSIGNMENT_FAILED = int(PlacementStatus.ATTRIBUTE_ASSIGNMENT_FAILED)
    NODE_CAST_FAILED = int(PlacementStatus.NODE_CAST_FAILED)
    APPEND_FAILED = int(PlacementStatus.APPEND_FAILED)

    # CLI errors
    CONFIGURATION_ERROR = 10
    INVALID_ARGUMENT = 11
    CHANNEL_DISABLED = 12
    INVALID_RECORD = 13
    NOTHING_TO_COLLECT = 14
    GENERAL_ERROR = 70  # EX_SOFTWARE

    # Signal-based exits (128 + signal number)
    CANCELLED = 130

    @classmethod
    def get_name(cls, code: int) -> str:
        """Get the name of an exit code.

        Args:
            code: The exit code value

        Returns:
            Human-readable name for the exit code
        """
        status = _placement_status(code)
        if status is not None:
            return status.name
        names = {
            cls.CONFIGURATION_ERROR: "CONFIGURATION_ERROR",
            cls.INVALID_ARGUMENT: "INVALID_ARGUMENT",
            cls.CHANNEL_DISABLED: "CHANNEL_DISABLED",
            cls.INVALID_RECORD: "INVALID_RECORD",
            cls.NOTHING_TO_COLLECT: "NOTHING_TO_COLLECT",
            cls.GENERAL_ERROR: "GENERAL_ERROR",
            cls.CANCELLED: "CANCELLED",
        }
        return names.get(code, f"UNKNOWN({code})")

    @classmethod
    def get_description(cls, code: int) -> str:
        """Get the description of an exit code.

        Args:
            code: The exit code value

        Returns:
            Human-readable description for the exit code
        """
        status = _placement_status(code)
        if status is not None:
            return status.description
        descriptions = {
            cls.CONFIGURATION_ERROR: "Configuration error or invalid config file",
            cls.INVALID_ARGUMENT: "Invalid command-line argument",
            cls.CHANNEL_DISABLED: "The result channel is disabled in configuration",
            cls.INVALID_RECORD: "A call record in the document is malformed or misplaced",
            cls.NOTHING_TO_COLLECT: "No result record is waiting",
            cls.GENERAL_ERROR: "An unexpected error occurred",
            cls.CANCELLED: "Operation cancelled by user",
        }
        return descriptions.get(code, f"Unknown exit code: {code}")
