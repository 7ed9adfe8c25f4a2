"""
schema_loader.py
Builds the in-memory IDL model (idl_model.Parser) from a JSON schema description: the parsed
form of a .fbs file with one entry per declaration, in declaration order.

Name resolution, implicit union members and union discriminator fields follow the rules the
FlatBuffers compiler applies when it parses a schema.
"""
import json
import os
from typing import Any, Dict, List, Optional, Tuple

from idl_model import (
    BaseType, Definition, EnumDef, EnumVal, FieldDef, Namespace, Parser, StructDef, Type, Value,
)


class SchemaLoadError(ValueError):
    pass


SCALAR_TYPE_NAMES = {
    'bool': BaseType.BOOL,
    'byte': BaseType.CHAR,
    'int8': BaseType.CHAR,
    'char': BaseType.CHAR,
    'ubyte': BaseType.UCHAR,
    'uint8': BaseType.UCHAR,
    'uchar': BaseType.UCHAR,
    'short': BaseType.SHORT,
    'int16': BaseType.SHORT,
    'ushort': BaseType.USHORT,
    'uint16': BaseType.USHORT,
    'int': BaseType.INT,
    'int32': BaseType.INT,
    'uint': BaseType.UINT,
    'uint32': BaseType.UINT,
    'long': BaseType.LONG,
    'int64': BaseType.LONG,
    'ulong': BaseType.ULONG,
    'uint64': BaseType.ULONG,
    'float': BaseType.FLOAT,
    'float32': BaseType.FLOAT,
    'double': BaseType.DOUBLE,
    'float64': BaseType.DOUBLE,
    'string': BaseType.STRING,
}

ENUM_KINDS = ('enum', 'union')
STRUCT_KINDS = ('struct', 'table')

# Constant stored for an attribute declared without a value, e.g. `(deprecated)`.
NO_VALUE_CONSTANT = "0"


def load_schema_file(path: str) -> Parser:
    """Read a JSON schema description from path and build the parsed schema."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            description = json.load(f)
    except json.JSONDecodeError as e:
        raise SchemaLoadError(f"{path}: invalid JSON: {e}") from e
    if isinstance(description, dict):
        description.setdefault('file', _default_source_file(path))
    return build_parser(description)


def load_schema_string(text: str) -> Parser:
    try:
        description = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaLoadError(f"invalid JSON: {e}") from e
    return build_parser(description)


def _default_source_file(description_path: str) -> str:
    description_path = os.path.abspath(description_path)
    stem = os.path.basename(description_path)
    for suffix in ('.json', '.fbs'):
        if stem.endswith(suffix):
            stem = stem[:-len(suffix)]
    return os.path.dirname(description_path).replace("\\", "/") + "/" + stem + ".fbs"


def _attributes(raw: Optional[Dict[str, Any]], where: str) -> Dict[str, Value]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise SchemaLoadError(f"{where}: 'attributes' must be an object")
    attributes = {}
    for name, constant in raw.items():
        if constant is None:
            constant = NO_VALUE_CONSTANT
        elif isinstance(constant, bool):
            constant = 'true' if constant else 'false'
        attributes[name] = Value(constant=str(constant))
    return attributes


def _expect(raw: Any, expected: type, what: str) -> Any:
    if not isinstance(raw, expected):
        kind = "an object" if expected is dict else ("a list" if expected is list else "a string")
        raise SchemaLoadError(f"{what} must be {kind}, got {raw!r}")
    return raw


def _optional_str(raw: Any, what: str) -> Optional[str]:
    return None if raw is None else _expect(raw, str, what)


def _doc(raw: Any) -> List[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return [raw]
    return [str(line) for line in _expect(raw, list, "'doc'")]


class SchemaBuilder:
    """
    Two passes over the declarations: first every enum, union, struct and table is created so
    that forward references resolve, then enum values, union members and fields are filled in.
    """
    def __init__(self, description: Dict[str, Any]):
        if not isinstance(description, dict):
            raise SchemaLoadError("schema description must be a JSON object")
        self.description = description
        self.file = _expect(description.get('file', ''), str, "'file'")
        self.default_namespace = Namespace.from_dotted(_optional_str(description.get('namespace'), "'namespace'"))
        self.parser = Parser(file=self.file)

    def build(self) -> Parser:
        declarations = _expect(self.description.get("declarations", []), list, "'declarations'")
        created: List[Tuple[Definition, Dict[str, Any]]] = []
        for decl in declarations:
            created.append((self._declare(decl), decl))
        for definition, decl in created:
            if isinstance(definition, EnumDef):
                if definition.is_union:
                    self._fill_union(definition, decl)
                else:
                    self._fill_enum(definition, decl)
        for definition, decl in created:
            if isinstance(definition, StructDef):
                self._fill_struct(definition, decl)
        self.parser.root_struct_def = self._root()
        return self.parser

    def _declare(self, decl: Dict[str, Any]) -> Definition:
        _expect(decl, dict, "declaration")
        kind = decl.get('kind')
        name = decl.get('name')
        if not name:
            raise SchemaLoadError(f"declaration without a name: {decl!r}")
        _expect(name, str, "declaration name")
        namespace = self.default_namespace
        if 'namespace' in decl:
            namespace = Namespace.from_dotted(_optional_str(decl['namespace'], f"{name}: 'namespace'"))
        common = dict(
            namespace=namespace,
            file=_expect(decl.get('file', self.file), str, f"{name}: 'file'"),
            attributes=_attributes(decl.get('attributes'), name),
            doc_comment=_doc(decl.get('doc')),
        )
        if kind in ENUM_KINDS:
            definition = EnumDef(name, is_union=(kind == 'union'), **common)
        elif kind in STRUCT_KINDS:
            definition = StructDef(name, fixed=(kind == 'struct'), **common)
        else:
            raise SchemaLoadError(f"{name}: unknown declaration kind {kind!r}")
        qualified = definition.get_fully_qualified_name()
        if self._find(qualified) is not None:
            raise SchemaLoadError(f"{qualified}: datatype already exists")
        if kind in ENUM_KINDS:
            self.parser.enums.append(definition)
        else:
            self.parser.structs.append(definition)
        return definition

    def _find(self, qualified_name: str) -> Optional[Definition]:
        return self.parser.lookup_struct(qualified_name) or self.parser.lookup_enum(qualified_name)

    def _lookup(self, name: str, namespace: Namespace) -> Optional[Definition]:
        """Resolve name from the innermost namespace outward, then as a fully qualified name."""
        components = namespace.components
        for i in range(len(components), -1, -1):
            definition = self._find('.'.join(components[:i] + [name]))
            if definition is not None:
                return definition
        return None

    def _fill_enum(self, enum_def: EnumDef, decl: Dict[str, Any]):
        underlying = decl.get('type', 'int')
        base_type = SCALAR_TYPE_NAMES.get(underlying) if isinstance(underlying, str) else None
        if base_type is None or not base_type.is_integer():
            raise SchemaLoadError(f"{enum_def.name}: underlying enum type must be integral, got {underlying!r}")
        enum_def.underlying_type = Type(base_type, enum_def=enum_def)
        raw_values = _expect(decl.get('values') or [], list, f"{enum_def.name}: 'values'")
        if not raw_values:
            raise SchemaLoadError(f"{enum_def.name}: enum must have at least one value")
        next_value = 0
        for raw in raw_values:
            if isinstance(raw, str):
                raw = {'name': raw}
            _expect(raw, dict, f"{enum_def.name}: enum value")
            if not raw.get('name'):
                raise SchemaLoadError(f"{enum_def.name}: enum value without a name")
            _expect(raw['name'], str, f"{enum_def.name}: enum value name")
            value = raw.get('value', next_value)
            if not isinstance(value, int) or isinstance(value, bool):
                raise SchemaLoadError(f"{enum_def.name}.{raw.get('name')}: enum value must be an integer")
            self._add_enum_value(enum_def, EnumVal(raw['name'], value, doc_comment=_doc(raw.get('doc'))))
            next_value = value + 1

    def _fill_union(self, enum_def: EnumDef, decl: Dict[str, Any]):
        self._add_enum_value(enum_def, EnumVal('NONE', 0, Type(BaseType.NONE)))
        namespace = enum_def.defined_namespace
        types = _expect(decl.get('types') or [], list, f"{enum_def.name}: 'types'")
        for value, type_name in enumerate(types, start=1):
            _expect(type_name, str, f"{enum_def.name}: union member")
            member = self._lookup(type_name, namespace)
            if not isinstance(member, StructDef) or member.fixed:
                raise SchemaLoadError(f"{enum_def.name}: union member {type_name!r} must be a table")
            union_type = Type(BaseType.STRUCT, struct_def=member)
            self._add_enum_value(enum_def, EnumVal(type_name.replace('.', '_'), value, union_type))

    @staticmethod
    def _add_enum_value(enum_def: EnumDef, val: EnumVal):
        if enum_def.lookup_value(val.name) is not None:
            raise SchemaLoadError(f"{enum_def.name}: enum value already exists: {val.name}")
        enum_def.values.append(val)

    def _parse_type(self, type_name: str, owner: StructDef) -> Type:
        type_name = type_name.strip()
        if type_name.startswith('[') and type_name.endswith(']'):
            element = self._parse_type(type_name[1:-1], owner)
            if element.base_type is BaseType.VECTOR:
                raise SchemaLoadError(f"{owner.name}: nested vector types not supported: {type_name}")
            return Type(BaseType.VECTOR, element.struct_def, element.enum_def, element=element.base_type)
        scalar = SCALAR_TYPE_NAMES.get(type_name)
        if scalar is not None:
            return Type(scalar)
        definition = self._lookup(type_name, owner.defined_namespace)
        if isinstance(definition, StructDef):
            return Type(BaseType.STRUCT, struct_def=definition)
        if isinstance(definition, EnumDef):
            if definition.is_union:
                return Type(BaseType.UNION, enum_def=definition)
            return Type(definition.underlying_type.base_type, enum_def=definition)
        raise SchemaLoadError(f"{owner.name}: type referenced but not defined: {type_name}")

    def _fill_struct(self, struct_def: StructDef, decl: Dict[str, Any]):
        for raw in _expect(decl.get('fields') or [], list, f"{struct_def.name}: 'fields'"):
            _expect(raw, dict, f"{struct_def.name}: field")
            name = raw.get('name')
            if not name:
                raise SchemaLoadError(f"{struct_def.name}: field without a name")
            _expect(name, str, f"{struct_def.name}: field name")
            if 'type' not in raw:
                raise SchemaLoadError(f"{struct_def.name}.{name}: field without a type")
            type_name = _expect(raw['type'], str, f"{struct_def.name}.{name}: 'type'")
            field_type = self._parse_type(type_name, struct_def)
            attributes = _attributes(raw.get('attributes'), f"{struct_def.name}.{name}")
            required = bool(raw.get('required')) or 'required' in attributes
            key = bool(raw.get('key')) or 'key' in attributes
            if struct_def.fixed:
                self._check_struct_field(struct_def, name, field_type)
            if key and struct_def.has_key:
                raise SchemaLoadError(f"{struct_def.name}: only one field may be set as 'key'")
            if field_type.base_type is BaseType.UNION or field_type.element is BaseType.UNION:
                self._add_field(struct_def, self._union_type_field(name, field_type))
            self._add_field(struct_def, FieldDef(name, field_type, required=required, key=key,
                                                 attributes=attributes, doc_comment=_doc(raw.get('doc'))))

    @staticmethod
    def _union_type_field(name: str, union_field_type: Type) -> FieldDef:
        enum_def = union_field_type.enum_def
        if union_field_type.base_type is BaseType.VECTOR:
            return FieldDef(name + '_type', Type(BaseType.VECTOR, enum_def=enum_def, element=BaseType.UTYPE))
        return FieldDef(name + '_type', Type(BaseType.UTYPE, enum_def=enum_def))

    @staticmethod
    def _check_struct_field(struct_def: StructDef, name: str, field_type: Type):
        base_type = field_type.base_type
        if base_type is BaseType.STRUCT and field_type.struct_def.fixed:
            return
        if base_type.is_scalar():
            return
        raise SchemaLoadError(f"{struct_def.name}.{name}: structs may contain only scalar or struct fields")

    @staticmethod
    def _add_field(struct_def: StructDef, field: FieldDef):
        if struct_def.lookup_field(field.name) is not None:
            raise SchemaLoadError(f"{struct_def.name}: field already exists: {field.name}")
        struct_def.fields.append(field)

    def _root(self) -> StructDef:
        root_name = self.description.get('root_type')
        if not root_name:
            raise SchemaLoadError("schema description has no root_type")
        _expect(root_name, str, "'root_type'")
        root = self._lookup(root_name, self.default_namespace)
        if not isinstance(root, StructDef) or root.fixed:
            raise SchemaLoadError(f"root type must be a table: {root_name}")
        return root


def build_parser(description: Dict[str, Any]) -> Parser:
    return SchemaBuilder(description).build()
