"""ZeroMQ queue transport.

There is no broker: the consuming side binds a PULL socket at the address and
the producing side connects a PUSH socket to it. Each message is two frames,
the queue name and the body; a consumer drops anything addressed to a queue
other than its own.
"""

from __future__ import annotations

import logging

import zmq

from ..errors import TransportError
from .base import Context, Delivery, Transport, background


logger = logging.getLogger(__name__)

zmq_context = zmq.Context.instance()


class _Socket(Transport):

    kind: int
    linger = 0

    def __init__(self, address: str, queue: str, durable: bool = False, exclusive: bool = False):
        self.address = address
        self.queue = queue
        self._queue_frame = queue.encode()

        if durable or exclusive:
            logger.debug(
                "durable/exclusive queues are not supported over ZeroMQ; ignored for %s",
                address,
            )

        self.socket = zmq_context.socket(self.kind)
        self.socket.setsockopt(zmq.LINGER, self.linger)

        try:
            self._attach()
        except zmq.ZMQError as exc:
            self.socket.close()
            raise TransportError(f"unable to attach to {address}: {exc}") from exc

    def _attach(self) -> None:
        raise NotImplementedError

    def close(self) -> None:
        self.socket.close()


class Consumer(_Socket):
    """PULL side of a ZeroMQ queue."""

    kind = zmq.PULL

    def _attach(self) -> None:
        self.socket.bind(self.address)

    def receive(self, ctx: Context = background) -> Delivery:
        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLIN)

        while True:
            ctx.check()
            try:
                ready = dict(poller.poll(int(ctx.wait_slice() * 1000)))
                if self.socket not in ready:
                    continue
                parts = self.socket.recv_multipart(flags=zmq.NOBLOCK)
            except zmq.Again:
                continue
            except zmq.ZMQError as exc:
                raise TransportError(f"unable to receive message: {exc}") from exc

            if len(parts) != 2:
                logger.debug("dropping malformed %d-frame message", len(parts))
                continue

            queue, body = parts
            if queue != self._queue_frame:
                logger.debug("dropping message for queue %r", queue)
                continue

            return Delivery(body)

    def ack(self, delivery: Delivery, ctx: Context = background) -> None:
        # PUSH/PULL has no settlement; delivery is final once received.
        ctx.check()

    def send(self, body: bytes, ctx: Context = background) -> None:
        raise TransportError("a ZeroMQ consumer cannot send")


class Producer(_Socket):
    """PUSH side of a ZeroMQ queue."""

    kind = zmq.PUSH

    # Milliseconds a pending send may hold up close(); a single-shot
    # producer closes right after its one send.
    linger = 1000

    def _attach(self) -> None:
        self.socket.connect(self.address)

    def receive(self, ctx: Context = background) -> Delivery:
        raise TransportError("a ZeroMQ producer cannot receive")

    def ack(self, delivery: Delivery, ctx: Context = background) -> None:
        raise TransportError("a ZeroMQ producer cannot acknowledge")

    def send(self, body: bytes, ctx: Context = background) -> None:
        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLOUT)

        while True:
            ctx.check()
            try:
                ready = dict(poller.poll(int(ctx.wait_slice() * 1000)))
                if self.socket not in ready:
                    continue
                self.socket.send_multipart((self._queue_frame, body), flags=zmq.NOBLOCK)
                return
            except zmq.Again:
                continue
            except zmq.ZMQError as exc:
                raise TransportError(f"unable to send message: {exc}") from exc
