''' Wrapper module around :mod:`orjson` to provide the equivalent of
    :func:`json.loads` and :func:`json.dumps`. Note that :func:`dumps`
    returns bytes, not a string; message bodies in mqtap are always bytes,
    and avoiding the round trip through str keeps the conversion pipeline
    byte-oriented from end to end.
'''

import orjson


JSONDecodeError = orjson.JSONDecodeError


def dumps(value, default=None):
    ''' Return the compact JSON encoding of *value* as bytes. The optional
        *default* callable is invoked for objects orjson cannot serialize
        natively.
    '''

    return orjson.dumps(value, default=default)


def loads(data):
    return orjson.loads(data)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
