import pytest

from google.protobuf import any_pb2
from google.protobuf import descriptor_pb2
from google.protobuf import timestamp_pb2

import mqtap


FieldDescriptorProto = descriptor_pb2.FieldDescriptorProto


def probe_file(package='mqtap.test', name='probe.proto'):
    """ Build the equivalent of:

            syntax = "proto3";
            package mqtap.test;

            message Probe {
                string name = 1;
                int32 count = 2;
                repeated string tags = 3;
            }
    """

    file_proto = descriptor_pb2.FileDescriptorProto()
    file_proto.name = name
    file_proto.package = package
    file_proto.syntax = 'proto3'

    message = file_proto.message_type.add()
    message.name = 'Probe'

    fields = (
        ('name', 1, FieldDescriptorProto.TYPE_STRING, FieldDescriptorProto.LABEL_OPTIONAL),
        ('count', 2, FieldDescriptorProto.TYPE_INT32, FieldDescriptorProto.LABEL_OPTIONAL),
        ('tags', 3, FieldDescriptorProto.TYPE_STRING, FieldDescriptorProto.LABEL_REPEATED),
    )

    for field_name, number, type, label in fields:
        field = message.field.add()
        field.name = field_name
        field.json_name = field_name
        field.number = number
        field.type = type
        field.label = label

    return file_proto



def add_field(message, name, number, type, label=FieldDescriptorProto.LABEL_OPTIONAL, type_name=None):

    field = message.field.add()
    field.name = name
    field.json_name = name
    field.number = number
    field.type = type
    field.label = label

    if type_name is not None:
        field.type_name = type_name

    return field



def rich_file():
    """ Build the equivalent of:

            syntax = "proto3";
            package mqtap.rich;

            import "google/protobuf/any.proto";
            import "google/protobuf/timestamp.proto";

            message Inner {
                int32 x = 1;
                string label = 2;
            }

            message Envelope {
                Inner inner = 1;
                map<string, int32> counts = 2;
                google.protobuf.Any payload = 3;
                google.protobuf.Timestamp sent = 4;
                repeated Inner items = 5;
            }
    """

    file_proto = descriptor_pb2.FileDescriptorProto()
    file_proto.name = 'rich.proto'
    file_proto.package = 'mqtap.rich'
    file_proto.syntax = 'proto3'
    file_proto.dependency.append('google/protobuf/any.proto')
    file_proto.dependency.append('google/protobuf/timestamp.proto')

    inner = file_proto.message_type.add()
    inner.name = 'Inner'
    add_field(inner, 'x', 1, FieldDescriptorProto.TYPE_INT32)
    add_field(inner, 'label', 2, FieldDescriptorProto.TYPE_STRING)

    envelope = file_proto.message_type.add()
    envelope.name = 'Envelope'

    entry = envelope.nested_type.add()
    entry.name = 'CountsEntry'
    entry.options.map_entry = True
    add_field(entry, 'key', 1, FieldDescriptorProto.TYPE_STRING)
    add_field(entry, 'value', 2, FieldDescriptorProto.TYPE_INT32)

    message = FieldDescriptorProto.TYPE_MESSAGE
    repeated = FieldDescriptorProto.LABEL_REPEATED
    optional = FieldDescriptorProto.LABEL_OPTIONAL

    add_field(envelope, 'inner', 1, message, optional, '.mqtap.rich.Inner')
    add_field(envelope, 'counts', 2, message, repeated, '.mqtap.rich.Envelope.CountsEntry')
    add_field(envelope, 'payload', 3, message, optional, '.google.protobuf.Any')
    add_field(envelope, 'sent', 4, message, optional, '.google.protobuf.Timestamp')
    add_field(envelope, 'items', 5, message, repeated, '.mqtap.rich.Inner')

    return file_proto



def strict_file():
    """ Build the equivalent of:

            syntax = "proto2";
            package mqtap.strict;

            message Strict {
                required int32 id = 1;
                optional string note = 2;
            }
    """

    file_proto = descriptor_pb2.FileDescriptorProto()
    file_proto.name = 'strict.proto'
    file_proto.package = 'mqtap.strict'
    file_proto.syntax = 'proto2'

    message = file_proto.message_type.add()
    message.name = 'Strict'
    add_field(message, 'id', 1, FieldDescriptorProto.TYPE_INT32, FieldDescriptorProto.LABEL_REQUIRED)
    add_field(message, 'note', 2, FieldDescriptorProto.TYPE_STRING)

    return file_proto



def well_known_file(module):

    return descriptor_pb2.FileDescriptorProto.FromString(module.DESCRIPTOR.serialized_pb)



@pytest.fixture
def descriptor_set_path(tmp_path):

    descriptor_set = descriptor_pb2.FileDescriptorSet()
    descriptor_set.file.append(probe_file())

    path = tmp_path / 'probe.desc'
    path.write_bytes(descriptor_set.SerializeToString())
    return path


@pytest.fixture
def ambiguous_set_path(tmp_path):

    descriptor_set = descriptor_pb2.FileDescriptorSet()
    descriptor_set.file.append(probe_file('mqtap.one', 'one.proto'))
    descriptor_set.file.append(probe_file('mqtap.two', 'two.proto'))

    path = tmp_path / 'ambiguous.desc'
    path.write_bytes(descriptor_set.SerializeToString())
    return path


@pytest.fixture
def handle(descriptor_set_path):
    return mqtap.schema.resolve(descriptor_set_path, 'mqtap.test.Probe')


@pytest.fixture
def rich_set_path(tmp_path):
    """ One descriptor set holding the well-known types it depends on, a
        proto3 file with nested, map, Any and Timestamp fields, and a proto2
        file with a required field.
    """

    descriptor_set = descriptor_pb2.FileDescriptorSet()
    descriptor_set.file.append(well_known_file(any_pb2))
    descriptor_set.file.append(well_known_file(timestamp_pb2))
    descriptor_set.file.append(rich_file())
    descriptor_set.file.append(strict_file())

    path = tmp_path / 'rich.desc'
    path.write_bytes(descriptor_set.SerializeToString())
    return path


@pytest.fixture
def envelope(rich_set_path):
    return mqtap.schema.resolve(rich_set_path, 'mqtap.rich.Envelope')


@pytest.fixture
def strict(rich_set_path):
    return mqtap.schema.resolve(rich_set_path, 'mqtap.strict.Strict')


# Probe(name='probe', count=3), in both encodings.

PROBE_BINARY = b'\x0a\x05probe\x10\x03'
PROBE_TEXT = b'{"name":"probe","count":3}'

# Field 1 claims five bytes of string, only two follow.

TRUNCATED_BINARY = b'\x0a\x05ab'


@pytest.fixture
def probe():

    class Probe:
        binary = PROBE_BINARY
        text = PROBE_TEXT
        truncated = TRUNCATED_BINARY

    return Probe



class FakeTransport(mqtap.transport.Transport):
    """ Scripted transport. Each entry in *bodies* is either the bytes of a
        message to deliver, or an exception to raise from receive(). Once the
        script runs out, receive() behaves as if the caller cancelled.
    """

    def __init__(self, bodies=(), fail_ack=False, fail_send=False):

        self.pending = list(bodies)
        self.fail_ack = fail_ack
        self.fail_send = fail_send
        self.events = list()
        self.sent = list()
        self.closed = False


    def receive(self, ctx=mqtap.transport.background):

        ctx.check()

        if not self.pending:
            raise mqtap.errors.TransportCancelled('script exhausted')

        item = self.pending.pop(0)
        if isinstance(item, Exception):
            raise item

        self.events.append(('receive', item))
        return mqtap.transport.Delivery(item, len(self.events))


    def ack(self, delivery, ctx=mqtap.transport.background):

        if self.fail_ack:
            raise mqtap.errors.TransportError('unable to accept message')

        self.events.append(('ack', delivery.body))


    def send(self, body, ctx=mqtap.transport.background):

        if self.fail_send:
            raise mqtap.errors.TransportError('unable to send message')

        self.events.append(('send', body))
        self.sent.append(body)


    def close(self):
        self.closed = True



class RecordingPrinter:

    def __init__(self):
        self.lines = list()
        self.errors = list()

    def emit(self, line):
        self.lines.append(line)

    def report(self, message):
        self.errors.append(message)



@pytest.fixture
def fake_transport():
    return FakeTransport


@pytest.fixture
def printer():
    return RecordingPrinter()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
