"""Transport layer implementations.

The backend is chosen by the scheme of the address: ``amqp://`` and
``amqps://`` select the :mod:`pika` based broker transport, ``tcp://``,
``ipc://`` and ``inproc://`` select the broker-less ZeroMQ transport.
"""

from urllib.parse import urlsplit

from ..errors import (
    ConfigurationError,
    TransportError,
    TransportCancelled,
    TransportConnectionError,
    TransportTimeout,
)
from .base import Context, Delivery, Transport, background


AMQP_SCHEMES = ("amqp", "amqps")
ZMQ_SCHEMES = ("tcp", "ipc", "inproc")


def open(address, queue, *, consumer, durable=False, exclusive=False):
    """ Open a :class:`Transport` for *queue* at *address*. The *consumer*
        flag picks the receiving side (True) or the sending side (False);
        only the ZeroMQ transport cares, an AMQP queue can do both.
    """

    scheme = urlsplit(address).scheme.lower()

    if scheme in AMQP_SCHEMES:
        from . import amqp
        return amqp.Queue(address, queue, durable=durable, exclusive=exclusive)

    if scheme in ZMQ_SCHEMES:
        from . import zmq
        if consumer:
            return zmq.Consumer(address, queue, durable=durable, exclusive=exclusive)
        return zmq.Producer(address, queue, durable=durable, exclusive=exclusive)

    raise ConfigurationError(f"unsupported address scheme {scheme!r} in {address!r}")


__all__ = [
    "Context",
    "Delivery",
    "Transport",
    "background",
    "open",
    "TransportError",
    "TransportCancelled",
    "TransportConnectionError",
    "TransportTimeout",
]
