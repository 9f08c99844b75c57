"""AMQP queue transport, backed by a blocking :mod:`pika` connection."""

from __future__ import annotations

import collections
import logging
from typing import Deque, Optional

import pika
import pika.exceptions

from ..errors import ConfigurationError, TransportConnectionError, TransportError
from .base import Context, Delivery, Transport, background


logger = logging.getLogger(__name__)


def _broker_params(address: str) -> pika.URLParameters:
    try:
        params = pika.URLParameters(address)
    except (ValueError, TypeError) as exc:
        raise ConfigurationError(f"invalid AMQP address {address!r}: {exc}") from exc

    params.heartbeat = 600
    params.blocked_connection_timeout = 300
    return params


class Queue(Transport):
    """Consume from, or publish to, a single named queue.

    The queue is declared on connect; *durable* asks the broker to keep the
    queue (and, on send, the message) across restarts. *exclusive* makes
    this the only consumer allowed on the queue while it is attached.
    """

    def __init__(
        self,
        address: str,
        queue: str,
        durable: bool = False,
        exclusive: bool = False,
        connection: Optional[pika.BlockingConnection] = None,
    ):
        self.address = address
        self.queue = queue
        self.durable = durable
        self.exclusive = exclusive
        self._consumer = None
        self._inbox: Deque[Delivery] = collections.deque()

        try:
            if connection is None:
                connection = pika.BlockingConnection(_broker_params(address))
            self._connection = connection
            self._channel = connection.channel()
            self._channel.queue_declare(queue=queue, durable=durable)
        except pika.exceptions.AMQPConnectionError as exc:
            raise TransportConnectionError(
                f"unable to connect to AMQP broker at {address}: {exc!r}"
            ) from exc
        except pika.exceptions.AMQPError as exc:
            raise TransportError(f"unable to declare queue {queue!r}: {exc!r}") from exc

        logger.debug("connected to %s, queue %r (durable=%s)", address, queue, durable)

    def receive(self, ctx: Context = background) -> Delivery:
        """Block until a message arrives, or *ctx* is cancelled or expires.

        Broker I/O is processed in bounded steps of ``ctx.wait_slice()``, so
        the wait never runs past the caller's deadline.
        """

        try:
            if self._consumer is None:
                self._channel.basic_qos(prefetch_count=1)
                self._consumer = self._channel.basic_consume(
                    queue=self.queue,
                    on_message_callback=self._on_message,
                    auto_ack=False,
                    exclusive=self.exclusive,
                )

            while True:
                ctx.check()
                if self._inbox:
                    return self._inbox.popleft()
                self._connection.process_data_events(time_limit=ctx.wait_slice())
        except pika.exceptions.ConsumerCancelled as exc:
            raise TransportError("consumer was cancelled by the broker") from exc
        except pika.exceptions.AMQPError as exc:
            raise TransportError(f"unable to receive message: {exc!r}") from exc

    def _on_message(self, _ch, method, _properties, body: bytes) -> None:
        self._inbox.append(Delivery(body, method.delivery_tag))

    def ack(self, delivery: Delivery, ctx: Context = background) -> None:
        ctx.check()
        try:
            self._channel.basic_ack(delivery_tag=delivery.tag)
        except pika.exceptions.AMQPError as exc:
            raise TransportError(f"unable to accept message: {exc!r}") from exc

    def send(self, body: bytes, ctx: Context = background) -> None:
        ctx.check()
        if self.durable:
            properties = pika.BasicProperties(
                delivery_mode=pika.spec.PERSISTENT_DELIVERY_MODE
            )
        else:
            properties = pika.BasicProperties()

        try:
            self._channel.basic_publish(
                exchange="",
                routing_key=self.queue,
                body=body,
                properties=properties,
            )
        except pika.exceptions.AMQPError as exc:
            raise TransportError(f"unable to send message: {exc!r}") from exc

    def close(self) -> None:
        try:
            if self._consumer is not None:
                self._channel.basic_cancel(self._consumer)
                self._consumer = None
            if self._connection.is_open:
                self._connection.close()
        except pika.exceptions.AMQPError:
            logger.debug("error closing AMQP connection", exc_info=True)
