"""Runtime resolution of a protobuf message type from a schema source.

The source is either a directory of ``.proto`` files, compiled on the fly
with the protoc bundled in :mod:`grpc_tools`, or a serialized
``FileDescriptorSet`` as written by ``protoc --descriptor_set_out``.
"""

from __future__ import annotations

import logging
import os
import tempfile
from importlib import resources
from pathlib import Path
from typing import List, Union

from google.protobuf import descriptor_pb2, descriptor_pool
from google.protobuf.message import DecodeError as ProtobufDecodeError

from ..errors import SchemaError
from .handle import Handle


logger = logging.getLogger(__name__)


def resolve(location: Union[str, os.PathLike], root_name: str) -> Handle:
    """Return a :class:`Handle` for the message *root_name* defined at *location*.

    *root_name* is normally fully qualified (``package.Message``); a bare
    message name is accepted when exactly one message in the schema has it.
    """

    path = Path(location)
    if path.is_dir():
        descriptor_set = compile_directory(path)
    elif path.is_file():
        descriptor_set = load_descriptor_set(path)
    else:
        raise SchemaError(f"schema location '{location}' does not exist")

    pool = _pool(descriptor_set)
    descriptor = _find_message(pool, descriptor_set, root_name)
    logger.debug("resolved %s from %s", descriptor.full_name, location)
    return Handle(descriptor)


def compile_directory(directory: Path) -> descriptor_pb2.FileDescriptorSet:
    """Compile every ``.proto`` file under *directory* into a descriptor set."""

    from grpc_tools import protoc

    sources = sorted(p.relative_to(directory).as_posix() for p in directory.rglob("*.proto"))
    if not sources:
        raise SchemaError(f"no .proto files found in '{directory}'")

    # Well-known types (google/protobuf/*.proto) ship inside grpc_tools.
    include = str(resources.files("grpc_tools") / "_proto")

    with tempfile.TemporaryDirectory() as scratch:
        output = os.path.join(scratch, "descriptor.pb")
        arguments = [
            "grpc_tools.protoc",
            f"--proto_path={directory}",
            f"--proto_path={include}",
            "--include_imports",
            f"--descriptor_set_out={output}",
        ] + sources

        status = protoc.main(arguments)
        if status != 0:
            raise SchemaError(f"unable to compile .proto files in '{directory}' (protoc exit {status})")

        return load_descriptor_set(Path(output))


def load_descriptor_set(path: Path) -> descriptor_pb2.FileDescriptorSet:
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise SchemaError(f"unable to read descriptor set '{path}': {exc}") from exc

    try:
        return descriptor_pb2.FileDescriptorSet.FromString(data)
    except ProtobufDecodeError as exc:
        raise SchemaError(f"'{path}' is not a serialized FileDescriptorSet: {exc}") from exc


def _pool(descriptor_set: descriptor_pb2.FileDescriptorSet) -> descriptor_pool.DescriptorPool:
    pool = descriptor_pool.DescriptorPool()

    # protoc emits dependencies ahead of their dependents with
    # --include_imports; hand-built sets may not, so retry until no progress.

    pending = list(descriptor_set.file)
    while pending:
        deferred = []
        for file_proto in pending:
            try:
                pool.AddSerializedFile(file_proto.SerializeToString())
            except (TypeError, KeyError, ValueError):
                deferred.append(file_proto)
        if len(deferred) == len(pending):
            names = ", ".join(f.name for f in deferred)
            raise SchemaError(f"unable to load schema files: {names}")
        pending = deferred

    return pool


def _message_names(descriptor_set: descriptor_pb2.FileDescriptorSet) -> List[str]:
    names = []

    def walk(prefix, messages):
        for message in messages:
            full = f"{prefix}.{message.name}" if prefix else message.name
            names.append(full)
            walk(full, message.nested_type)

    for file_proto in descriptor_set.file:
        walk(file_proto.package, file_proto.message_type)
    return names


def _find_message(pool, descriptor_set, root_name: str):
    if not root_name:
        raise SchemaError("a root message name is required")

    try:
        return pool.FindMessageTypeByName(root_name)
    except KeyError:
        pass

    candidates = [
        name for name in _message_names(descriptor_set)
        if name.rsplit(".", 1)[-1] == root_name
    ]
    if len(candidates) == 1:
        return pool.FindMessageTypeByName(candidates[0])
    if candidates:
        raise SchemaError(
            f"message name {root_name!r} is ambiguous: {', '.join(sorted(candidates))}"
        )
    raise SchemaError(f"unable to find root message {root_name!r} in schema")
