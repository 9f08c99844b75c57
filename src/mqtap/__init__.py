""" Python implementation of mqtap, a single-queue message bridge: consume
    messages from a queue and display them, or produce a message to a queue,
    converting the message body between plain bytes, base64, gzip, protobuf
    and protobuf's structured-text (JSON) encoding on the way.
"""

# Utility components.

from . import errors
from . import json

# Submodules used by multiple other components.

from . import convert
from . import schema
from . import transport
from . import options

# Primary public-facing interfaces.

from .consume import Consumer
from .produce import Producer
from .bridge import read, write

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
