""" Command line interface:

        mqtap read  --queue NAME [options]
        mqtap write --queue NAME (--input-data DATA | --input-file PATH) [options]

    The exit status identifies the kind of failure, see :data:`exit_codes`.
"""

import argparse
import logging
import signal

from . import bridge
from . import log
from .convert import ByteConversion, Encoding
from .errors import (
    ConfigurationError,
    ConversionError,
    MqtapError,
    TransportCancelled,
    TransportError,
    UnsupportedCombinationError,
)
from .options import ReadOptions, WriteOptions, default_address
from .transport import Context


logger = logging.getLogger(__name__)


# Order matters: the first matching class wins, so subclasses come first.

exit_codes = (
    (TransportCancelled, 130),
    (ConfigurationError, 2),
    (UnsupportedCombinationError, 2),
    (TransportError, 3),
    (ConversionError, 4),
    (MqtapError, 1),
)


def exit_code(exception):

    for error_class, code in exit_codes:
        if isinstance(exception, error_class):
            return code

    return 1



def _add_shared(parser):

    parser.add_argument('--address', default=default_address(),
        help='Destination host address (default: %(default)s)')
    parser.add_argument('--queue', default='',
        help='Name of the queue')
    parser.add_argument('--queue-durable', action='store_true',
        help='Whether the queue we declare should survive server restarts')
    parser.add_argument('--protobuf-dir',
        help='Directory with .proto files, or a compiled descriptor set')
    parser.add_argument('--protobuf-root-message',
        help='Root message in the protobuf schema (required if --protobuf-dir is set)')
    parser.add_argument('--timeout', type=float, default=None,
        help='Give up after this many seconds (default: wait forever)')



def build_parser():

    parser = argparse.ArgumentParser(prog='mqtap',
        description='Read or write messages on a message queue, converting between encodings.')
    parser.add_argument('--log-level', default='WARNING',
        help='Logging level (default: %(default)s)')

    commands = parser.add_subparsers(dest='command', required=True)

    read = commands.add_parser('read', help='Consume message(s) from a queue')
    _add_shared(read)
    read.add_argument('--queue-exclusive', action=argparse.BooleanOptionalAction, default=True,
        help='Whether mqtap should be the only consumer of the queue')
    read.add_argument('--line-numbers', action='store_true',
        help='Display line numbers for each message')
    read.add_argument('-f', '--follow', action='store_true',
        help='Continuous read (ie. `tail -f`)')
    read.add_argument('--output-type', choices=('plain', 'protobuf'), default='plain',
        help='The type of message(s) you will receive on the bus')
    read.add_argument('--convert', choices=('base64', 'gzip'), default=None,
        help='Convert received (output) message(s)')

    write = commands.add_parser('write', help='Produce one message to a queue')
    _add_shared(write)
    write.add_argument('--input-data',
        help='Data to write to the queue')
    write.add_argument('--input-file',
        help='File containing input data (1 file is 1 message)')
    write.add_argument('--input-type', choices=('plain', 'base64', 'jsonpb'), default='plain',
        help='Treat input as this type')
    write.add_argument('--output-type', choices=('plain', 'protobuf'), default='plain',
        help='Convert input to this type when writing message')

    return parser



def read_options(arguments):

    if arguments.convert is None:
        convert = ByteConversion.NONE
    else:
        convert = ByteConversion(arguments.convert)

    return ReadOptions(
        address=arguments.address,
        queue=arguments.queue,
        queue_durable=arguments.queue_durable,
        protobuf_dir=arguments.protobuf_dir,
        protobuf_root_message=arguments.protobuf_root_message,
        queue_exclusive=arguments.queue_exclusive,
        line_numbers=arguments.line_numbers,
        follow=arguments.follow,
        wire_type=Encoding(arguments.output_type),
        convert=convert,
    )



def write_options(arguments):

    return WriteOptions(
        address=arguments.address,
        queue=arguments.queue,
        queue_durable=arguments.queue_durable,
        protobuf_dir=arguments.protobuf_dir,
        protobuf_root_message=arguments.protobuf_root_message,
        input_data=arguments.input_data,
        input_file=arguments.input_file,
        input_type=Encoding(arguments.input_type),
        output_type=Encoding(arguments.output_type),
    )



def main(argv=None):

    parser = build_parser()
    arguments = parser.parse_args(argv)

    level = getattr(logging, arguments.log_level.upper(), logging.WARNING)
    log.setup_logging(level)

    ctx = Context(arguments.timeout)

    # Ctrl-C cancels the context; the transport notices within one wait
    # slice and the run ends with TransportCancelled.

    previous = signal.signal(signal.SIGINT, lambda signum, frame: ctx.cancel())

    try:
        if arguments.command == 'read':
            bridge.read(read_options(arguments), ctx)
        else:
            bridge.write(write_options(arguments), ctx)
    except MqtapError as e:
        logger.debug('run failed', exc_info=True)
        parser.exit(exit_code(e), 'mqtap: ' + str(e) + '\n')
    finally:
        signal.signal(signal.SIGINT, previous)

    return 0


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
