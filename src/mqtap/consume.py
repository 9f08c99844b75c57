""" The consume loop: receive a message, acknowledge it, convert it for
    display, and emit it; then either stop (single-shot) or go around again
    (follow mode).
"""

import logging

from . import printer as printer_module
from .errors import ConversionError
from .transport import background


logger = logging.getLogger(__name__)


class Consumer:
    """ Bind a :class:`mqtap.transport.Transport` to a decoding
        :class:`mqtap.convert.Pipeline` and an output sink. The *printer*
        must provide ``emit(line)`` and ``report(message)``; the default is
        a :class:`mqtap.printer.Printer` on stdout/stderr.

        Transport failures always end the run: they propagate out of
        :func:`run` untouched, in either mode. Conversion failures end a
        single-shot run, but in *follow* mode they are reported and that one
        message is skipped; a reader tailing a queue favors staying alive
        over showing every message.
    """

    def __init__(self, transport, pipeline, follow=False, line_numbers=False, printer=None):

        if printer is None:
            printer = printer_module.Printer()

        self.transport = transport
        self.pipeline = pipeline
        self.follow = follow
        self.line_numbers = line_numbers
        self.printer = printer


    def run(self, ctx=background):
        """ Consume messages until done; return the number of messages that
            were emitted. In single-shot mode that is always one, unless an
            exception is raised.
        """

        logger.info('Listening for message(s) ...')

        # Line numbers only count emitted messages; a skipped message does
        # not use one up.

        emitted = 0

        while True:
            delivery = self.transport.receive(ctx)
            self.transport.ack(delivery, ctx)

            try:
                data = self.pipeline.decode_for_display(delivery.body)
            except ConversionError as e:
                if not self.follow:
                    raise

                logger.warning('skipping message: %s', e)
                self.printer.report(str(e))
                continue

            emitted += 1
            line = printer_module.text(data)

            if self.line_numbers:
                line = '%d: %s' % (emitted, line)

            self.printer.emit(line)

            if not self.follow:
                break

        logger.debug('Reader exiting')
        return emitted


# end of class Consumer


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
