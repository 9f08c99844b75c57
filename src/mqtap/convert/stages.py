""" Byte transform stages. Each stage is a plain function taking bytes and
    returning bytes; none of them hold any state, so a single stage can be
    shared freely between pipelines.
"""

import base64
import binascii
import gzip
import zlib

from ..errors import ConversionError


def identity(data):
    return data



def base64_decode(data):
    """ Decode standard (RFC 4648) base64. Whitespace is not tolerated; a
        payload that is not strictly base64 is a :class:`ConversionError`.
    """

    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ConversionError('unable to base64 decode message: ' + str(e)) from e



def gzip_decompress(data):
    """ Decompress a gzip stream. An empty payload is not a gzip stream, even
        though :func:`gzip.decompress` happily returns empty output for it.
    """

    if not data:
        raise ConversionError('unable to gunzip message: empty payload')

    try:
        return gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as e:
        raise ConversionError('unable to gunzip message: ' + str(e)) from e


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
