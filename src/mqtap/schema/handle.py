""" A resolved, runtime-only description of one protobuf message type, and
    the two operations the rest of mqtap needs from it: :func:`encode`, from
    structured text (the canonical protobuf JSON mapping) to schema-binary
    bytes, and :func:`decode`, the other way around.

    No generated ``_pb2`` modules are involved; the message class is built
    from the descriptor with :mod:`google.protobuf.message_factory`.
"""

from google.protobuf import json_format
from google.protobuf import message as protobuf_message
from google.protobuf import message_factory

from .. import json
from ..errors import ConversionError, DecodeError


class Handle:
    """ Immutable wrapper around a protobuf message descriptor. Every call to
        :func:`new` returns a fresh, empty message instance; nothing about
        one conversion is visible to the next.

        :ivar descriptor: The :class:`google.protobuf.descriptor.Descriptor`.
        :ivar name: The fully-qualified message name.
        :ivar pool: The descriptor pool the message type was resolved in;
            types packed in ``Any`` fields are looked up here.
    """

    def __init__(self, descriptor):

        self.descriptor = descriptor
        self.name = descriptor.full_name
        self.pool = descriptor.file.pool
        self._message_class = message_factory.GetMessageClass(descriptor)


    def __repr__(self):
        return 'Handle(' + repr(self.name) + ')'


    def new(self):
        """ Return a new, empty message of this type.
        """

        return self._message_class()


# end of class Handle



def decode(handle, data):
    """ Interpret *data* as the schema-binary encoding of a *handle* message,
        and return its structured-text rendering as compact UTF-8 JSON bytes.
        Raises :class:`mqtap.errors.DecodeError` if *data* is malformed, or
        if it cannot be rendered (an ``Any`` field packing a type that the
        schema does not define, for example).
    """

    message = handle.new()

    try:
        message.ParseFromString(data)
    except protobuf_message.DecodeError as e:
        raise DecodeError('unable to decode ' + handle.name + ' message: ' + str(e)) from e

    # MessageToDict emits fields in field-number order, which makes the
    # rendering deterministic for a given binary input. Types packed in Any
    # fields are looked up in the pool the schema was resolved into.

    try:
        fields = json_format.MessageToDict(message, descriptor_pool=handle.pool)
    except (json_format.SerializeToJsonError, TypeError, ValueError, KeyError) as e:
        raise DecodeError('unable to render ' + handle.name + ' message: ' + str(e)) from e

    return json.dumps(fields)



def encode(handle, text):
    """ Parse *text* (str or bytes) as the structured-text rendering of a
        *handle* message and return the schema-binary encoding. Raises
        :class:`mqtap.errors.ConversionError` if the text does not parse,
        does not match the message type, or leaves a required field unset.
    """

    message = handle.new()

    try:
        json_format.Parse(text, message, descriptor_pool=handle.pool)
    except (json_format.ParseError, TypeError, ValueError) as e:
        raise ConversionError('unable to convert structured text to ' + handle.name + ': ' + str(e)) from e

    try:
        return message.SerializeToString()
    except protobuf_message.EncodeError as e:
        raise ConversionError('unable to encode ' + handle.name + ': ' + str(e)) from e


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
