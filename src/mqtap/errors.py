""" Exception hierarchy for mqtap. Every failure that can end a read or write
    run is one of these, so that a caller (the command line interface, in
    particular) can tell a bad configuration apart from a broken transport
    or a malformed message.

    The transport exceptions are re-exported by :mod:`mqtap.transport`,
    next to the transport contract they belong to.
"""


class MqtapError(Exception):
    """ Base class for all mqtap exceptions.
    """


class ConfigurationError(MqtapError):
    """ Invalid, missing, or conflicting options. Always raised before any
        message is exchanged with the transport.
    """


class SchemaError(ConfigurationError):
    """ The schema source could not be compiled or loaded, or the requested
        root message type is not defined in it.
    """


class UnsupportedCombinationError(MqtapError):
    """ The requested input/output encoding pair has no defined conversion.
        Raised when a :class:`mqtap.convert.Pipeline` is built, not when a
        message is converted.
    """


class ConversionError(MqtapError):
    """ A message body could not be converted: bad base64, bad gzip, or
        structured text that does not match the schema.
    """


class DecodeError(ConversionError):
    """ A message body is not a valid schema-binary instance of the
        resolved message type.
    """


# Transport agnostic exceptions

class TransportError(MqtapError):
    """ Base class for all transport-layer errors: receive, acknowledge, and
        send failures. These are never retried.
    """


class TransportConnectionError(TransportError):
    """ The transport could not establish or maintain a connection.
    """


class TransportCancelled(TransportError):
    """ A blocking receive or send was cancelled by the caller.
    """


class TransportTimeout(TransportCancelled):
    """ The deadline imposed by the caller expired during a blocking
        receive or send.
    """


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
