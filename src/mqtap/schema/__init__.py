""" Schema handling: resolve a message type at runtime, then convert message
    bodies between schema-binary and structured text with it.
"""

from .handle import Handle, decode, encode
from .resolve import resolve

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
