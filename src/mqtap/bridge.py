""" Entry points for a single read or write run against one queue. This is
    where the options are validated, the schema (if any) is resolved, the
    conversion pipeline is built and the transport is opened, in that order;
    every configuration problem surfaces before the broker is contacted.
"""

import logging

from . import schema
from . import transport
from .consume import Consumer
from .convert import Pipeline
from .produce import Producer


logger = logging.getLogger(__name__)


def _resolve(options):
    """ Return the schema handle required by *options*, or None if the
        requested conversion does not involve a schema.
    """

    if not options.conversion().needs_schema:
        return None

    return schema.resolve(options.protobuf_dir, options.protobuf_root_message)



def read(options, ctx=transport.background, printer=None):
    """ Consume from the queue described by a :class:`mqtap.options.ReadOptions`
        instance. Returns the number of messages emitted.
    """

    options.validate()

    handle = _resolve(options)
    pipeline = Pipeline.reader(options.conversion(), handle)

    opened = transport.open(options.address, options.queue,
                            consumer=True,
                            durable=options.queue_durable,
                            exclusive=options.queue_exclusive)

    with opened:
        consumer = Consumer(opened, pipeline,
                            follow=options.follow,
                            line_numbers=options.line_numbers,
                            printer=printer)
        return consumer.run(ctx)



def write(options, ctx=transport.background):
    """ Produce one message to the queue described by a
        :class:`mqtap.options.WriteOptions` instance. Returns the bytes that
        were sent.
    """

    options.validate()

    handle = _resolve(options)
    pipeline = Pipeline.writer(options.conversion(), handle)

    opened = transport.open(options.address, options.queue,
                            consumer=False,
                            durable=options.queue_durable)

    with opened:
        producer = Producer(opened, pipeline)
        return producer.run(options.input_data, options.input_file, ctx)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
