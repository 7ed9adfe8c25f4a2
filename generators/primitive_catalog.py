"""
Numeric primitives of the IDL with the bounds emitted into the JSON schema `definitions`.
"""
from typing import NamedTuple, Optional, Union

from idl_model import BaseType


class IntegerInfo(NamedTuple):
    type: BaseType
    min_value: int
    max_value: int
    name: str


class DecimalInfo(NamedTuple):
    type: BaseType
    bits: int
    name: str


def _signed(bits: int, base_type: BaseType, name: str) -> IntegerInfo:
    return IntegerInfo(base_type, -(1 << (bits - 1)), (1 << (bits - 1)) - 1, name)


def _unsigned(bits: int, base_type: BaseType, name: str) -> IntegerInfo:
    return IntegerInfo(base_type, 0, (1 << bits) - 1, name)


INTEGER_INFOS = (
    _signed(8, BaseType.CHAR, "char"),
    _unsigned(8, BaseType.UCHAR, "uchar"),
    _signed(16, BaseType.SHORT, "short"),
    _unsigned(16, BaseType.USHORT, "ushort"),
    _signed(32, BaseType.INT, "int"),
    _unsigned(32, BaseType.UINT, "uint"),
    _signed(64, BaseType.LONG, "long"),
    _unsigned(64, BaseType.ULONG, "ulong"),
)

DECIMAL_INFOS = (
    DecimalInfo(BaseType.FLOAT, 32, "float"),
    DecimalInfo(BaseType.DOUBLE, 64, "double"),
)


def lookup_primitive(base_type: BaseType) -> Optional[Union[IntegerInfo, DecimalInfo]]:
    for info in INTEGER_INFOS:
        if info.type is base_type:
            return info
    for info in DECIMAL_INFOS:
        if info.type is base_type:
            return info
    return None
