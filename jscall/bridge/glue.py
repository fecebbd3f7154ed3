"""
Status-code entry points for host runtimes.

Nothing raised by the mailbox crosses this boundary; every failure becomes
a PlacementStatus value the caller can inspect.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from .mailbox import Mailbox
from .protocol import CallDirection, CallRecord, MailboxError, PlacementStatus

if TYPE_CHECKING:
    from jscall.config import MailboxConfig

logger = logging.getLogger(__name__)


def _mailbox_config(config: Optional["MailboxConfig"]) -> "MailboxConfig":
    if config is not None:
        return config
    from jscall.config import get_config
    return get_config().mailbox


def place_function_call(
    embed_handle: Any,
    call: str,
    returnto: str,
    args: str,
    config: Optional["MailboxConfig"] = None,
) -> int:
    """
    Place a <infunction call="..." returnto="..." args="..."/> record in the
    document's <jscall> anchor.

    Placement only; this does not wait for the embedded script to run the
    call.

    Args:
        embed_handle: Embedding handle or DocumentProvider
        call: Name of the function to invoke on the embedded side
        returnto: Correlation token for routing any result back
        args: Serialized argument payload
        config: Mailbox configuration (global config if not given)

    Returns:
        A PlacementStatus value: 0 on success, 1-8 on failure
    """
    try:
        mailbox = Mailbox.open(embed_handle, _mailbox_config(config))
        mailbox.place_call(call, args, returnto)
    except MailboxError as e:
        status = e.status if e.status is not None else PlacementStatus.DOCUMENT_UNAVAILABLE
        logger.warning(f"Call placement failed [{status.name}]: {e}")
        return int(status)

    logger.debug(f"Placed call {call!r} (returnto={returnto!r})")
    return int(PlacementStatus.SUCCESS)


def collect_function_call(
    embed_handle: Any,
    config: Optional["MailboxConfig"] = None,
) -> Optional[CallRecord]:
    """
    Retrieve and remove a waiting <outfunction> result record.

    Deprecated: the embedded script is expected to process calls through
    its own polling loop. This only works when
    mailbox.result_channel_enabled is set.

    Returns:
        The result record, or None if the channel is disabled, the
        mailbox is unusable, or nothing is waiting
    """
    try:
        mailbox = Mailbox.open(embed_handle, _mailbox_config(config))
        return mailbox.collect(CallDirection.RESULT)
    except MailboxError as e:
        logger.warning(f"Result collection failed: {e}")
        return None
