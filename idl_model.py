"""
idl_model.py
In-memory representation of a parsed FlatBuffers IDL schema: namespaces, enums, unions,
structs/tables and their typed fields. This is what the JSON Schema generator consumes.
"""
from enum import Enum
from typing import List, Dict, Optional


class BaseType(Enum):
    NONE = "none"
    UTYPE = "utype"  # union discriminator
    BOOL = "bool"
    CHAR = "char"
    UCHAR = "uchar"
    SHORT = "short"
    USHORT = "ushort"
    INT = "int"
    UINT = "uint"
    LONG = "long"
    ULONG = "ulong"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    VECTOR = "vector"
    STRUCT = "struct"
    UNION = "union"

    def is_integer(self) -> bool:
        return self in _INTEGER_TYPES

    def is_float(self) -> bool:
        return self in (BaseType.FLOAT, BaseType.DOUBLE)

    def is_scalar(self) -> bool:
        return self is BaseType.UTYPE or self is BaseType.BOOL or self.is_integer() or self.is_float()


_INTEGER_TYPES = frozenset([
    BaseType.CHAR, BaseType.UCHAR,
    BaseType.SHORT, BaseType.USHORT,
    BaseType.INT, BaseType.UINT,
    BaseType.LONG, BaseType.ULONG,
])


class Namespace:
    def __init__(self, components: Optional[List[str]] = None):
        self.components = list(components or [])

    @classmethod
    def from_dotted(cls, dotted: Optional[str]) -> 'Namespace':
        if not dotted:
            return cls()
        return cls([c for c in dotted.split('.') if c])

    def get_fully_qualified_name(self, name: str) -> str:
        return '.'.join(self.components + [name])

    def __repr__(self):
        return f"Namespace({'.'.join(self.components)!r})"


class Type:
    """
    A field or value type. base_type is the tag; element is set for vectors, enum_def for
    enums, unions and union discriminators, struct_def for struct/table references.
    """
    def __init__(self, base_type: BaseType = BaseType.NONE, struct_def: Optional['StructDef'] = None,
                 enum_def: Optional['EnumDef'] = None, element: BaseType = BaseType.NONE):
        self.base_type = base_type
        self.element = element
        self.struct_def = struct_def
        self.enum_def = enum_def

    def __repr__(self):
        return f"Type(base_type={self.base_type.name}, element={self.element.name})"


class Value:
    """A typed constant. Attribute values and field defaults are kept as their source text."""
    def __init__(self, constant: str = "0", type: Optional[Type] = None):
        self.constant = constant
        self.type = type or Type()


class Definition:
    def __init__(self, name: str, namespace: Optional[Namespace] = None, file: str = "",
                 attributes: Optional[Dict[str, Value]] = None, doc_comment: Optional[List[str]] = None):
        self.name = name
        self.defined_namespace = namespace or Namespace()
        self.file = file
        self.attributes = attributes if attributes is not None else {}
        self.doc_comment = list(doc_comment or [])

    @property
    def namespace(self) -> Namespace:
        return self.defined_namespace

    def get_fully_qualified_namespace(self) -> str:
        return '.'.join(self.defined_namespace.components)

    def get_fully_qualified_name(self) -> str:
        return self.defined_namespace.get_fully_qualified_name(self.name)

    def __repr__(self):
        return f"{type(self).__name__}({self.get_fully_qualified_name()!r})"


class FieldDef:
    def __init__(self, name: str, type: Type, required: bool = False, key: bool = False,
                 attributes: Optional[Dict[str, Value]] = None, doc_comment: Optional[List[str]] = None):
        self.name = name
        self.value = Value(type=type)
        self.required = required
        self.key = key
        self.attributes = attributes if attributes is not None else {}
        self.doc_comment = list(doc_comment or [])

    @property
    def type(self) -> Type:
        return self.value.type


class StructDef(Definition):
    def __init__(self, name: str, fields: Optional[List[FieldDef]] = None, fixed: bool = False, **kwargs):
        super().__init__(name, **kwargs)
        self.fields = list(fields or [])
        self.fixed = fixed

    @property
    def has_key(self) -> bool:
        return self.get_key_field() is not None

    @property
    def key_field(self) -> Optional[FieldDef]:
        return self.get_key_field()

    def get_key_field(self) -> Optional[FieldDef]:
        for field in self.fields:
            if field.key:
                return field
        return None

    def lookup_field(self, name: str) -> Optional[FieldDef]:
        for field in self.fields:
            if field.name == name:
                return field
        return None


class EnumVal:
    def __init__(self, name: str, value: int, union_type: Optional[Type] = None,
                 doc_comment: Optional[List[str]] = None):
        self.name = name
        self.value = value
        self.union_type = union_type or Type()
        self.doc_comment = list(doc_comment or [])


class EnumDef(Definition):
    def __init__(self, name: str, values: Optional[List[EnumVal]] = None, is_union: bool = False,
                 underlying_type: Optional[Type] = None, **kwargs):
        super().__init__(name, **kwargs)
        self.values = list(values or [])
        self.is_union = is_union
        if underlying_type is None:
            underlying_type = Type(BaseType.UTYPE if is_union else BaseType.INT, enum_def=self)
        self.underlying_type = underlying_type

    def lookup_value(self, name: str) -> Optional[EnumVal]:
        for val in self.values:
            if val.name == name:
                return val
        return None


class Parser:
    """
    The result of parsing a schema: enums (including unions) and structs (including tables)
    in declaration order, plus the root table.
    """
    def __init__(self, enums: Optional[List[EnumDef]] = None, structs: Optional[List[StructDef]] = None,
                 root_struct_def: Optional[StructDef] = None, file: Optional[str] = None):
        self.enums = list(enums or [])
        self.structs = list(structs or [])
        self.root_struct_def = root_struct_def
        self.file = file

    def lookup_struct(self, qualified_name: str) -> Optional[StructDef]:
        for struct_def in self.structs:
            if struct_def.get_fully_qualified_name() == qualified_name:
                return struct_def
        return None

    def lookup_enum(self, qualified_name: str) -> Optional[EnumDef]:
        for enum_def in self.enums:
            if enum_def.get_fully_qualified_name() == qualified_name:
                return enum_def
        return None
