""" Read and write options. These are populated by :mod:`mqtap.cli` from
    command-line arguments, with defaults taken from the environment where
    that makes sense:

        MQTAP_ADDRESS   Default broker address (amqp://localhost:5672).

    Nothing in here talks to a broker; :func:`validate` only inspects the
    options themselves and the local filesystem, and raises
    :class:`mqtap.errors.ConfigurationError` on the first problem found.
"""

import dataclasses
import os
import typing

from .convert import ByteConversion, ConversionRequest, Encoding
from .errors import ConfigurationError


def default_address():
    return os.environ.get('MQTAP_ADDRESS', 'amqp://localhost:5672')



@dataclasses.dataclass
class Options:
    """ Options shared by reading and writing.
    """

    address: str = dataclasses.field(default_factory=default_address)
    queue: str = ''
    queue_durable: bool = False
    protobuf_dir: typing.Optional[str] = None
    protobuf_root_message: typing.Optional[str] = None


    def validate(self):

        if not self.address:
            raise ConfigurationError('--address cannot be empty')

        if not self.queue:
            raise ConfigurationError('--queue cannot be empty')

        if self.conversion().needs_schema:
            self._validate_schema()


    def _validate_schema(self):

        if not self.protobuf_dir:
            raise ConfigurationError("'--protobuf-dir' must be set when type is set to 'protobuf'")

        if not self.protobuf_root_message:
            raise ConfigurationError("'--protobuf-root-message' must be set when type is set to 'protobuf'")

        if not os.path.exists(self.protobuf_dir):
            raise ConfigurationError("--protobuf-dir '%s' does not exist" % (self.protobuf_dir))


    def conversion(self):
        raise NotImplementedError


# end of class Options



@dataclasses.dataclass
class ReadOptions(Options):
    """ Options for consuming from a queue. The *wire_type* is the encoding
        of the messages on the bus; protobuf messages are displayed as
        structured text. The *convert* stage runs after that.
    """

    queue_exclusive: bool = True
    line_numbers: bool = False
    follow: bool = False
    wire_type: Encoding = Encoding.PLAIN
    convert: ByteConversion = ByteConversion.NONE


    def conversion(self):

        if self.wire_type is Encoding.PROTOBUF:
            output = Encoding.JSONPB
        else:
            output = self.wire_type

        return ConversionRequest(self.wire_type, output, self.convert)


# end of class ReadOptions



@dataclasses.dataclass
class WriteOptions(Options):
    """ Options for producing a single message. Exactly one of *input_data*
        and *input_file* provides the message source.
    """

    input_data: typing.Optional[str] = None
    input_file: typing.Optional[str] = None
    input_type: Encoding = Encoding.PLAIN
    output_type: Encoding = Encoding.PLAIN


    def validate(self):

        Options.validate(self)
        self.validate_source()


    def validate_source(self):

        if self.input_data and self.input_file:
            raise ConfigurationError('--input-data and --input-file cannot both be set (choose one!)')

        if self.input_file and not os.path.isfile(self.input_file):
            raise ConfigurationError("--input-file '%s' does not exist" % (self.input_file))


    def conversion(self):
        return ConversionRequest(self.input_type, self.output_type)


# end of class WriteOptions


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
