"""
Thread-confined mailbox session.

The document belongs to the embedding's event loop. Host and embedded
script take turns on that loop, so every mutation has to happen on its
thread. MailboxSession makes that an API rule: the synchronous methods
refuse to run elsewhere, and other threads go through submit().
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import threading
from typing import TYPE_CHECKING, Any, Optional

from .mailbox import Mailbox
from .protocol import CallDirection, CallRecord

if TYPE_CHECKING:
    from jscall.config import MailboxConfig

logger = logging.getLogger(__name__)


class WrongThreadError(RuntimeError):
    """A mailbox operation was attempted off the owning thread."""


class MailboxSession:
    """
    A Mailbox bound to the event loop that owns its document.

    Example:
        session = await MailboxSession.open(provider)
        session.place_call("add", "1,2", "req-1")

        # from a worker thread
        future = session.submit("add", "1,2", "req-2")
        future.result()
    """

    def __init__(self, mailbox: Mailbox, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._mailbox = mailbox
        self._loop = loop or asyncio.get_running_loop()
        self._owner_thread: Optional[int] = None

        if self._loop_running_here():
            self._owner_thread = threading.get_ident()
        else:
            # Owner is whichever thread runs the loop; bound before any submit()
            self._loop.call_soon_threadsafe(self._bind_owner)

    @classmethod
    async def open(cls, source: Any, config: Optional["MailboxConfig"] = None) -> "MailboxSession":
        """Open a mailbox on the running loop and bind it to this thread."""
        mailbox = Mailbox.open(source, config)
        return cls(mailbox, asyncio.get_running_loop())

    @property
    def mailbox(self) -> Mailbox:
        return self._mailbox

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    @property
    def on_owner_thread(self) -> bool:
        """Check if the caller is on the thread that owns the document."""
        return self._loop_running_here() or threading.get_ident() == self._owner_thread

    def place(self, record: CallRecord) -> Any:
        self._check_thread()
        return self._mailbox.place(record)

    def place_call(self, call: str, args: str, returnto: str) -> CallRecord:
        self._check_thread()
        return self._mailbox.place_call(call, args, returnto)

    def pending(self, direction: CallDirection = CallDirection.REQUEST) -> list[CallRecord]:
        self._check_thread()
        return self._mailbox.pending(direction)

    def collect(self, direction: CallDirection = CallDirection.RESULT) -> Optional[CallRecord]:
        self._check_thread()
        return self._mailbox.collect(direction)

    async def place_call_async(self, call: str, args: str, returnto: str) -> CallRecord:
        """Place a call from a coroutine running on the owning loop."""
        if asyncio.get_running_loop() is not self._loop:
            raise WrongThreadError("place_call_async must be awaited on the mailbox's own loop")
        return self.place_call(call, args, returnto)

    def submit(self, call: str, args: str, returnto: str) -> concurrent.futures.Future:
        """
        Schedule a placement on the owning loop from any thread.

        Returns:
            A future resolved with the placed CallRecord, or with the
            MailboxError that stopped it
        """
        future: concurrent.futures.Future = concurrent.futures.Future()

        def _run() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                future.set_result(self.place_call(call, args, returnto))
            except Exception as e:
                future.set_exception(e)

        self._loop.call_soon_threadsafe(_run)
        logger.debug(f"Scheduled placement of {call!r} on owner loop")
        return future

    def _loop_running_here(self) -> bool:
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False

    def _bind_owner(self) -> None:
        self._owner_thread = threading.get_ident()
        logger.debug(f"Mailbox session bound to thread {self._owner_thread}")

    def _check_thread(self) -> None:
        if not self.on_owner_thread:
            raise WrongThreadError(
                "Mailbox operations must run on the thread that owns the document"
            )
