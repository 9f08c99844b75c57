import base64
import gzip

import mqtap
import pytest

from mqtap.convert import ByteConversion, ConversionRequest, Encoding, Pipeline


PLAIN = ConversionRequest(Encoding.PLAIN, Encoding.PLAIN)
PROTOBUF_TO_TEXT = ConversionRequest(Encoding.PROTOBUF, Encoding.JSONPB)
TEXT_TO_PROTOBUF = ConversionRequest(Encoding.JSONPB, Encoding.PROTOBUF)


def reader(convert=ByteConversion.NONE, handle=None):
    request = ConversionRequest(Encoding.PLAIN, Encoding.PLAIN, convert)
    return Pipeline.reader(request, handle)


def test_plain_identity():

    pipeline = Pipeline.reader(PLAIN)

    assert pipeline.decode_for_display(b'hello') == b'hello'
    assert pipeline.decode_for_display(b'') == b''


def test_byte_conversions():

    pipeline = reader(ByteConversion.BASE64)
    assert pipeline.decode_for_display(base64.b64encode(b'hello')) == b'hello'

    pipeline = reader(ByteConversion.GZIP)
    assert pipeline.decode_for_display(gzip.compress(b'hello')) == b'hello'


def test_gzip_empty_payload():

    pipeline = reader(ByteConversion.GZIP)

    with pytest.raises(mqtap.errors.ConversionError):
        pipeline.decode_for_display(b'')


def test_protobuf_decode(handle, probe):

    pipeline = Pipeline.reader(PROTOBUF_TO_TEXT, handle)
    assert pipeline.decode_for_display(probe.binary) == probe.text


def test_protobuf_decode_failure_stops_pipeline(handle, probe):
    """ A body that fails schema decoding must not continue on to the byte
        stage; the error raised is the schema decoding error, not whatever
        the byte stage would make of the original body.
    """

    request = ConversionRequest(Encoding.PROTOBUF, Encoding.JSONPB, ByteConversion.GZIP)
    pipeline = Pipeline.reader(request, handle)

    with pytest.raises(mqtap.errors.DecodeError) as caught:
        pipeline.decode_for_display(probe.truncated)

    assert caught.type is mqtap.errors.DecodeError


def test_schema_stage_runs_before_byte_stage(handle, probe):

    # The decoded structured text is what gets handed to the byte stage;
    # structured text is not base64, so this conversion fails.

    request = ConversionRequest(Encoding.PROTOBUF, Encoding.JSONPB, ByteConversion.BASE64)
    pipeline = Pipeline.reader(request, handle)

    with pytest.raises(mqtap.errors.ConversionError) as caught:
        pipeline.decode_for_display(probe.binary)

    assert caught.type is mqtap.errors.ConversionError


def test_decode_is_pure(handle, probe):

    pipeline = Pipeline.reader(PROTOBUF_TO_TEXT, handle)

    first = pipeline.decode_for_display(probe.binary)
    second = pipeline.decode_for_display(probe.binary)
    assert first == second == probe.text

    other = mqtap.schema.encode(handle, b'{"name":"other","tags":["a","b"]}')
    assert pipeline.decode_for_display(other) == b'{"name":"other","tags":["a","b"]}'
    assert pipeline.decode_for_display(probe.binary) == probe.text


def test_encode_plain():

    pipeline = Pipeline.writer(PLAIN)

    assert pipeline.encode_for_transmission(b'hello') == b'hello'
    assert pipeline.encode_for_transmission(b'') == b''


def test_encode_protobuf(handle, probe):

    pipeline = Pipeline.writer(TEXT_TO_PROTOBUF, handle)
    assert pipeline.encode_for_transmission(probe.text) == probe.binary


def test_encode_bad_text(handle):

    pipeline = Pipeline.writer(TEXT_TO_PROTOBUF, handle)

    for bad in (b'not json', b'{"no_such_field": 1}', b'{"count": "many"}'):
        with pytest.raises(mqtap.errors.ConversionError):
            pipeline.encode_for_transmission(bad)


ROUND_TRIPS = (
    ('handle', (b'{}', b'{"name":"probe","count":3}', b'{"count":-7,"tags":["x","y","z"]}')),
    ('envelope', (
        b'{"inner":{"x":1},"items":[{"x":2},{"label":"b"}]}',
        b'{"counts":{"k":2},"sent":"2024-01-02T03:04:05.250Z"}',
        b'{"payload":{"@type":"type.googleapis.com/mqtap.rich.Inner","x":2,"label":"p"}}',
    )),
    ('strict', (b'{"id":0}', b'{"id":7,"note":"n"}')),
)


@pytest.mark.parametrize('fixture,texts', ROUND_TRIPS)
def test_round_trip(request, fixture, texts):

    handle = request.getfixturevalue(fixture)
    writer = Pipeline.writer(TEXT_TO_PROTOBUF, handle)
    reader = Pipeline.reader(PROTOBUF_TO_TEXT, handle)

    for text in texts:
        assert reader.decode_for_display(writer.encode_for_transmission(text)) == text


def test_required_field_missing(strict):

    pipeline = Pipeline.writer(TEXT_TO_PROTOBUF, strict)

    with pytest.raises(mqtap.errors.ConversionError):
        pipeline.encode_for_transmission(b'{}')


def test_unsupported_combinations(handle):

    unsupported = (
        ConversionRequest(Encoding.BASE64, Encoding.PLAIN),
        ConversionRequest(Encoding.BASE64, Encoding.PROTOBUF),
        ConversionRequest(Encoding.JSONPB, Encoding.PLAIN),
        ConversionRequest(Encoding.PLAIN, Encoding.PROTOBUF),
        ConversionRequest(Encoding.PLAIN, Encoding.PLAIN, ByteConversion.GZIP),
        ConversionRequest(Encoding.PLAIN, Encoding.PLAIN, ByteConversion.BASE64),
    )

    for request in unsupported:
        with pytest.raises(mqtap.errors.UnsupportedCombinationError):
            Pipeline.writer(request, handle)

    with pytest.raises(mqtap.errors.UnsupportedCombinationError):
        Pipeline.reader(TEXT_TO_PROTOBUF, handle)

    with pytest.raises(mqtap.errors.UnsupportedCombinationError):
        Pipeline.reader(ConversionRequest(Encoding.JSONPB, Encoding.JSONPB), handle)


def test_unsupported_before_schema_check():

    with pytest.raises(mqtap.errors.UnsupportedCombinationError):
        Pipeline.writer(ConversionRequest(Encoding.JSONPB, Encoding.PLAIN))


def test_schema_requires_handle():

    with pytest.raises(mqtap.errors.ConfigurationError):
        Pipeline.reader(PROTOBUF_TO_TEXT)

    with pytest.raises(mqtap.errors.ConfigurationError):
        Pipeline.writer(TEXT_TO_PROTOBUF)


def test_wrong_direction():

    with pytest.raises(mqtap.errors.UnsupportedCombinationError):
        Pipeline.writer(PLAIN).decode_for_display(b'hello')

    with pytest.raises(mqtap.errors.UnsupportedCombinationError):
        Pipeline.reader(PLAIN).encode_for_transmission(b'hello')


def test_request_str():

    assert str(PLAIN) == 'plain -> plain'
    assert str(ConversionRequest(Encoding.PLAIN, Encoding.PLAIN, ByteConversion.GZIP)) == 'plain -> plain (gzip)'


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
