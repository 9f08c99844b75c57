""" The conversion pipeline: an ordered sequence of schema and byte stages,
    selected once from configuration and then applied, unchanged, to every
    message body that passes through.

    Decoding (bus to display) and encoding (input to bus) are
    asymmetric. A reader has to display whatever traffic is on the queue, so
    decoding supports every byte-axis conversion; a writer commits to one
    known target shape, so encoding supports a short list of input/output
    pairs and nothing else.
"""

import dataclasses
import enum
import functools

from .. import schema
from ..errors import ConfigurationError, UnsupportedCombinationError
from . import stages


class ByteConversion(enum.Enum):
    """ Byte-axis conversions, applied independently of any schema.
    """

    NONE = 'none'
    BASE64 = 'base64'
    GZIP = 'gzip'


class Encoding(enum.Enum):
    """ Message body encodings. PROTOBUF is the schema-binary encoding,
        JSONPB the structured-text (canonical protobuf JSON) encoding.
    """

    PLAIN = 'plain'
    BASE64 = 'base64'
    JSONPB = 'jsonpb'
    PROTOBUF = 'protobuf'

    @property
    def schema(self):
        return self in (Encoding.JSONPB, Encoding.PROTOBUF)


@dataclasses.dataclass(frozen=True)
class ConversionRequest:
    """ The (input, output) encoding pair for one direction of conversion,
        plus the byte-axis conversion to apply.
    """

    input: Encoding = Encoding.PLAIN
    output: Encoding = Encoding.PLAIN
    convert: ByteConversion = ByteConversion.NONE

    @property
    def needs_schema(self):
        return self.input.schema or self.output.schema

    def __str__(self):
        text = self.input.value + ' -> ' + self.output.value
        if self.convert is not ByteConversion.NONE:
            text += ' (' + self.convert.value + ')'
        return text


_decode_pairs = {
    (Encoding.PLAIN, Encoding.PLAIN),
    (Encoding.PROTOBUF, Encoding.JSONPB),
}

_decode_byte_stages = {
    ByteConversion.NONE: stages.identity,
    ByteConversion.BASE64: stages.base64_decode,
    ByteConversion.GZIP: stages.gzip_decompress,
}

_encode_pairs = {
    (Encoding.PLAIN, Encoding.PLAIN),
    (Encoding.JSONPB, Encoding.PROTOBUF),
}

# Base64 and gzip are not yet wired up on the encoding side.

_encode_byte_stages = {
    ByteConversion.NONE: stages.identity,
}



class Pipeline:
    """ Bind a :class:`ConversionRequest` for decoding, encoding, or both, to
        an optional :class:`mqtap.schema.Handle`. All validation happens here,
        at construction time: an unsupported pair raises
        :class:`UnsupportedCombinationError`, and a schema-axis conversion
        without a *handle* raises :class:`ConfigurationError`. After that,
        converting a message only ever fails because of the message.

        A :class:`Pipeline` holds no mutable state; it is safe to share one
        between any number of consumers.
    """

    def __init__(self, decode=None, encode=None, handle=None):

        self.handle = handle
        self.decode_request = decode
        self.encode_request = encode

        self._decode_stages = None
        self._encode_stages = None

        if decode is not None:
            self._decode_stages = self._build_decode(decode)

        if encode is not None:
            self._encode_stages = self._build_encode(encode)


    @classmethod
    def reader(cls, request, handle=None):
        return cls(decode=request, handle=handle)


    @classmethod
    def writer(cls, request, handle=None):
        return cls(encode=request, handle=handle)


    def _require_handle(self, request):

        if request.needs_schema and self.handle is None:
            raise ConfigurationError('a resolved schema is required for ' + str(request))


    def _build_decode(self, request):

        if (request.input, request.output) not in _decode_pairs:
            raise UnsupportedCombinationError('unsupported decode combination: ' + str(request))

        try:
            byte_stage = _decode_byte_stages[request.convert]
        except KeyError:
            raise UnsupportedCombinationError('unsupported conversion: ' + str(request))

        self._require_handle(request)

        # Schema decoding runs first; the byte conversion then operates on
        # whatever the schema stage produced (or the raw body, if there is
        # no schema stage).

        pipeline = list()

        if request.input is Encoding.PROTOBUF:
            pipeline.append(functools.partial(schema.decode, self.handle))

        pipeline.append(byte_stage)
        return tuple(pipeline)


    def _build_encode(self, request):

        if (request.input, request.output) not in _encode_pairs:
            raise UnsupportedCombinationError('unsupported input/output combination: ' + str(request))

        try:
            byte_stage = _encode_byte_stages[request.convert]
        except KeyError:
            raise UnsupportedCombinationError('unsupported conversion: ' + str(request))

        self._require_handle(request)

        pipeline = [byte_stage]

        if request.output is Encoding.PROTOBUF:
            pipeline.append(functools.partial(schema.encode, self.handle))

        return tuple(pipeline)


    def decode_for_display(self, body):
        """ Convert a message *body* received from the bus into the bytes to
            display. Raises :class:`mqtap.errors.ConversionError` (or its
            :class:`mqtap.errors.DecodeError` subclass) if the body cannot be
            converted; no later stage runs after a failed one.
        """

        if self._decode_stages is None:
            raise UnsupportedCombinationError('pipeline is not configured for decoding')

        data = body
        for stage in self._decode_stages:
            data = stage(data)

        return data


    def encode_for_transmission(self, source):
        """ Convert *source* bytes (read from the command line or a file) into
            the bytes to put on the bus.
        """

        if self._encode_stages is None:
            raise UnsupportedCombinationError('pipeline is not configured for encoding')

        data = source
        for stage in self._encode_stages:
            data = stage(data)

        return data


# end of class Pipeline


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
