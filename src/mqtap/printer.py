""" Output and error sinks for the consume loop. Converted messages are
    emitted one per line on stdout; per-message errors that do not stop a
    follow-mode reader are reported on stderr.
"""

import sys


class Printer:
    """ The default sink: *out* and *err* are text streams, stdout and
        stderr unless otherwise specified. Neither method raises.
    """

    def __init__(self, out=None, err=None):

        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr


    def emit(self, line):
        self.out.write(line + '\n')
        self.out.flush()


    def report(self, message):
        self.err.write('error: ' + message + '\n')
        self.err.flush()


# end of class Printer



def text(data):
    """ Render a message body as printable text. Bytes that are not valid
        UTF-8 are replaced rather than raising; the output is for display.
    """

    return data.decode('utf-8', errors='replace')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
