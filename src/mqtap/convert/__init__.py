""" Message body conversion: byte-axis stages, and the pipeline that orders
    them together with the schema stages.
"""

from . import stages
from .pipeline import ByteConversion, ConversionRequest, Encoding, Pipeline

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
