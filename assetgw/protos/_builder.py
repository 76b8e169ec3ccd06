# SPDX-License-Identifier: Apache-2.0
"""Private descriptor pool holding the Fabric messages used by the client.

Only the fields the gateway protocol needs are declared. Field numbers and
wire types follow fabric-protos, so the messages interoperate with a peer.
Enum fields are declared as int32, which shares the enum wire encoding.
"""
import logging

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory, timestamp_pb2

_logger = logging.getLogger(__name__)

FieldDescriptorProto = descriptor_pb2.FieldDescriptorProto

STRING = FieldDescriptorProto.TYPE_STRING
BYTES = FieldDescriptorProto.TYPE_BYTES
INT32 = FieldDescriptorProto.TYPE_INT32
UINT64 = FieldDescriptorProto.TYPE_UINT64
BOOL = FieldDescriptorProto.TYPE_BOOL
MESSAGE = FieldDescriptorProto.TYPE_MESSAGE

OPTIONAL = FieldDescriptorProto.LABEL_OPTIONAL
REPEATED = FieldDescriptorProto.LABEL_REPEATED

pool = descriptor_pool.DescriptorPool()
pool.AddSerializedFile(timestamp_pb2.DESCRIPTOR.serialized_pb)


def field(name, number, type, type_name=None, repeated=False):
    proto = FieldDescriptorProto(
        name=name,
        number=number,
        type=type,
        label=REPEATED if repeated else OPTIONAL,
        json_name=_json_name(name))
    if type_name:
        proto.type_name = type_name
    return proto


def message(name, *fields):
    return descriptor_pb2.DescriptorProto(name=name, field=list(fields))


def add_file(name, package, messages, dependencies=()):
    """Register a proto3 file and return its message classes keyed by name."""
    file_proto = descriptor_pb2.FileDescriptorProto(
        name=name,
        package=package,
        syntax='proto3',
        dependency=list(dependencies),
        message_type=list(messages))

    _logger.debug(f'add_file - registering {name} with {len(file_proto.message_type)} messages')
    pool.AddSerializedFile(file_proto.SerializeToString())

    classes = {}
    for msg in file_proto.message_type:
        descriptor = pool.FindMessageTypeByName(f'{package}.{msg.name}')
        classes[msg.name] = message_factory.GetMessageClass(descriptor)
    return classes


def _json_name(name):
    head, *rest = name.split('_')
    return head + ''.join(part.capitalize() for part in rest)
