"""
msgpack encoding of scan models and positions for transport to other processes.
"""
import msgpack

from . import models
from .errors import InvalidModel
from .position import Position

POSITION_TYPE = 'position'


def encode(obj):
    """
    Encode a model, scan region, ROI or position as bytes

    :param obj: object to encode
    :return: bytes
    """
    if isinstance(obj, Position):
        data = dict(obj.to_dict(), type=POSITION_TYPE)
    else:
        data = models.to_dict(obj)
    return msgpack.packb(data, use_bin_type=True)


def decode(payload):
    """
    Decode bytes produced by encode

    :param payload: bytes
    :return: model, scan region, ROI or position
    """
    try:
        data = msgpack.unpackb(payload, raw=False)
    except (msgpack.UnpackException, ValueError) as err:
        raise InvalidModel('Cannot decode payload: {}'.format(err)) from err
    if isinstance(data, dict) and data.get('type') == POSITION_TYPE:
        return Position.from_dict(data)
    return models.from_dict(data)


def encode_positions(positions):
    """
    Encode a sequence of positions as a single msgpack stream
    """
    packer = msgpack.Packer(use_bin_type=True)
    return b''.join(packer.pack(position.to_dict()) for position in positions)


def decode_positions(payload):
    """
    Generate positions from a stream produced by encode_positions
    """
    unpacker = msgpack.Unpacker(raw=False)
    unpacker.feed(payload)
    for data in unpacker:
        yield Position.from_dict(data)
