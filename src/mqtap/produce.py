""" The produce path: resolve the message source, convert it once, and send
    the result as a single message. There is no loop and no retry.
"""

import logging
import os

from .errors import ConfigurationError
from .transport import background


logger = logging.getLogger(__name__)


def read_source(input_data=None, input_file=None):
    """ Return the bytes of the message to produce. Exactly one of an inline
        *input_data* value or an *input_file* path may be set; setting both,
        or naming a file that does not exist, is a
        :class:`mqtap.errors.ConfigurationError`. With neither set the
        message is empty.
    """

    if input_data and input_file:
        raise ConfigurationError('--input-data and --input-file cannot both be set (choose one!)')

    if input_file:
        if not os.path.isfile(input_file):
            raise ConfigurationError("--input-file '%s' does not exist" % (input_file))

        try:
            with open(input_file, 'rb') as source:
                return source.read()
        except OSError as e:
            raise ConfigurationError("unable to read file '%s': %s" % (input_file, e)) from e

    if input_data:
        return input_data.encode('utf-8')

    return b''



class Producer:
    """ Bind a :class:`mqtap.transport.Transport` to an encoding
        :class:`mqtap.convert.Pipeline`.
    """

    def __init__(self, transport, pipeline):

        self.transport = transport
        self.pipeline = pipeline


    def run(self, input_data=None, input_file=None, ctx=background):
        """ Produce one message from *input_data* or *input_file*. The source
            is checked before anything else happens; the transport is only
            touched, exactly once, after a successful conversion.
        """

        source = read_source(input_data, input_file)

        request = self.pipeline.encode_request
        if request is not None and request.needs_schema and self.pipeline.handle is None:
            raise ConfigurationError('a resolved schema is required for ' + str(request))

        value = self.pipeline.encode_for_transmission(source)
        self.write(value, ctx)
        return value


    def write(self, value, ctx=background):
        """ Wrapper for the transport send, to have one place to log (and,
            in tests, to observe) the outgoing message.
        """

        logger.debug('sending %d byte message', len(value))
        self.transport.send(value, ctx)


# end of class Producer


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
