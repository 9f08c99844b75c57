"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`mqtap.convert` so that the conversion pipeline remains
transport-agnostic: the consume loop and the produce path only ever see
:class:`Transport`, :class:`Delivery` and :class:`Context`.
"""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Optional

from ..errors import TransportCancelled, TransportTimeout


class Context:
    """Cancellation and deadline for blocking transport calls.

    A transport polls :meth:`check` between short waits; :meth:`cancel` may be
    called from any thread (or a signal handler) to abort a blocked receive or
    send. The optional *timeout* is a deadline in seconds from construction.
    """

    #: Longest single wait a transport should block for before checking back.
    slice = 0.25

    def __init__(self, timeout: Optional[float] = None):
        self._cancelled = threading.Event()
        if timeout is None:
            self.deadline = None
        else:
            self.deadline = time.monotonic() + timeout

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> Optional[float]:
        """Seconds until the deadline, or None if there is no deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def wait_slice(self) -> float:
        """Duration of the next bounded wait, never past the deadline."""
        remaining = self.remaining()
        if remaining is None:
            return self.slice
        return min(self.slice, remaining)

    def check(self) -> None:
        """Raise if the caller has cancelled, or the deadline has passed."""
        if self._cancelled.is_set():
            raise TransportCancelled("operation cancelled")
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise TransportTimeout("deadline exceeded")


class _Background(Context):
    """The default context. It has no deadline and ignores :meth:`cancel`,
    since every call made without an explicit context shares it."""

    def cancel(self) -> None:
        pass


#: Context used when the caller does not supply one: never cancelled, no deadline.
background = _Background()


class Delivery:
    """One message received from a transport.

    *body* is the opaque byte payload; *tag* is whatever the transport needs
    to acknowledge this specific message later.
    """

    __slots__ = ("body", "tag")

    def __init__(self, body: bytes, tag: Any = None):
        self.body = body
        self.tag = tag

    def __repr__(self) -> str:
        return f"Delivery({len(self.body)} bytes, tag={self.tag!r})"


class Transport(ABC):
    """Minimal contract for a queue transport."""

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @abstractmethod
    def receive(self, ctx: Context = background) -> Delivery:
        """Block until the next message arrives on the queue."""

    @abstractmethod
    def ack(self, delivery: Delivery, ctx: Context = background) -> None:
        """Settle a message previously returned by :meth:`receive`."""

    @abstractmethod
    def send(self, body: bytes, ctx: Context = background) -> None:
        """Put one message on the queue."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying connection/socket."""
