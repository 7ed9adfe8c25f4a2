"""
JSON Schema generator for a parsed IDL schema.
Generates a JSON Schema (draft-04) document describing every enum, union, struct and table,
with the numeric primitives as shared definitions and the root table as the document `$ref`.
"""
from typing import List

from idl_model import BaseType, Definition, EnumDef, Parser, StructDef, Type
from code_writer import CodeWriter
from generators.base_generator import BaseGenerator
from generators.generator_utils import gen_full_name, gen_native_type, gen_type_ref, quote
from generators.primitive_catalog import DECIMAL_INFOS, INTEGER_INFOS, lookup_primitive

SCHEMA_DRAFT = "http://json-schema.org/draft-04/schema#"
UNION_SUFFIX = "Union"


def generated_file_name(path: str, file_name: str) -> str:
    return path + file_name + ".schema.json"


def gen_scalar_type(name: str, base_type: BaseType) -> str:
    info = lookup_primitive(base_type)
    if info is not None:
        return f'"$ref" : "#/definitions/{info.name}"'
    return f'"type" : "{name}"'


def _gen_element_type(type_: Type) -> str:
    element = type_.element
    if element is BaseType.STRUCT:
        return gen_type_ref(type_.struct_def)
    if element is BaseType.UNION:
        return gen_type_ref(type_.enum_def, UNION_SUFFIX)
    if element is BaseType.UTYPE:
        return gen_type_ref(type_.enum_def)
    return gen_scalar_type(gen_native_type(element), element)


def gen_type(type_: Type) -> str:
    """
    Translate a field type into a JSON fragment to be placed inside an object literal.
    The fragment carries no leading or trailing comma.
    """
    enum_def = type_.enum_def
    if enum_def is not None and not enum_def.is_union:
        # reference to an enum type
        if type_.base_type is BaseType.VECTOR:
            return f'"type" : "array", "items" : {{ {gen_type_ref(enum_def)} }}'
        return gen_type_ref(enum_def)
    base_type = type_.base_type
    if base_type is BaseType.VECTOR:
        return f'"type" : "array", "items" : {{ {_gen_element_type(type_)} }}'
    if base_type is BaseType.STRUCT:
        return gen_type_ref(type_.struct_def)
    if base_type is BaseType.UNION:
        return gen_type_ref(enum_def, UNION_SUFFIX)
    if base_type is BaseType.UTYPE:
        return gen_type_ref(enum_def)
    return gen_scalar_type(gen_native_type(base_type), base_type)


def _separated(items: List[str], separator: str = ", ") -> str:
    return separator.join(items)


class JsonSchemaGenerator(BaseGenerator):
    """
    Emits the whole document into a CodeWriter and saves it as <path><file_name>.schema.json.
    """

    def __init__(self, parser: Parser, path: str, file_name: str, verbose: bool = False):
        super().__init__(parser, path, file_name, verbose)
        self.code = CodeWriter()

    def generated_file_name(self) -> str:
        return generated_file_name(self.path, self.file_name)

    def is_exclusive(self, path: str) -> bool:
        """True if path names the primary input file rather than an included one."""
        ref_path = "/" + self.file_name + ".fbs"
        return ref_path in (path or "").replace("\\", "/")

    def _write_basic_info(self, definition: Definition, indent: str):
        code = self.code
        exclusive = "true" if self.is_exclusive(definition.file) else "false"
        code += f'{indent}"exclusiveDefinition" : {exclusive},'
        if definition.attributes:
            code += f'{indent}"attributes" : {{'
            attributes = list(definition.attributes.items())
            for i, (attr_name, attr_value) in enumerate(attributes):
                line = f'{indent}  {quote(attr_name)}: {quote(attr_value.constant)}'
                if i < len(attributes) - 1:
                    line += ","
                code += line
            code += f'{indent}}},'
        code += f'{indent}"namespace" : {quote(definition.get_fully_qualified_namespace())},'
        code += f'{indent}"name" : {quote(definition.name)},'
        comment = ''.join(definition.doc_comment)
        if comment:
            code += f'{indent}"description" : {quote(comment)},'

    def _write_integer_primitives(self, entries_after: int):
        code = self.code
        for i, prim in enumerate(INTEGER_INFOS):
            code += f'    "{prim.name}" : {{'
            code += '      "type": "integer",'
            code += f'      "name": "{prim.name}",'
            code += f'      "minimum": {prim.min_value},'
            code += f'      "maximum": {prim.max_value}'
            code += self._close_entry(entries_after + len(INTEGER_INFOS) - 1 - i)

    def _write_decimal_primitives(self, entries_after: int):
        code = self.code
        for i, prim in enumerate(DECIMAL_INFOS):
            code += f'    "{prim.name}" : {{'
            code += '      "type": "number",'
            code += f'      "name": "{prim.name}",'
            code += f'      "bits": {prim.bits}'
            code += self._close_entry(entries_after + len(DECIMAL_INFOS) - 1 - i)

    @staticmethod
    def _close_entry(entries_after: int) -> str:
        return "    }," if entries_after > 0 else "    }"

    def _write_enum(self, enum_def: EnumDef, entries_after: int):
        code = self.code
        indent = "      "
        code += f'    "{gen_full_name(enum_def)}" : {{'
        code += f'{indent}"type" : "string",'
        self._write_basic_info(enum_def, indent)
        code += f'{indent}"isEnum" : "true",'
        names = _separated([quote(val.name) for val in enum_def.values])
        code += f'{indent}"enum": [{names}],'
        values = _separated([str(val.value) for val in enum_def.values])
        code += f'{indent}"enum_values": [{values}]'
        code += self._close_entry(entries_after)

    def _write_union(self, enum_def: EnumDef, entries_after: int):
        code = self.code
        indent = "      "
        code += f'    "{gen_full_name(enum_def)}{UNION_SUFFIX}" : {{'
        self._write_basic_info(enum_def, indent)
        code += f'{indent}"isUnion" : "true",'
        code += f'{indent}"anyOf": ['
        members = [val.union_type.struct_def for val in enum_def.values
                   if val.union_type.base_type is BaseType.STRUCT]
        for i, struct_def in enumerate(members):
            elem = f'{indent}  {{ {gen_type_ref(struct_def)} }}'
            if i < len(members) - 1:
                elem += ","
            code += elem
        code += f'{indent}]'
        code += self._close_entry(entries_after)

    def _write_struct(self, struct_def: StructDef, entries_after: int):
        code = self.code
        indent = "      "
        code += f'    "{gen_full_name(struct_def)}" : {{'
        code += f'{indent}"type" : "object",'
        self._write_basic_info(struct_def, indent)
        code += f'{indent}"properties" : {{'
        fields = struct_def.fields
        for i, field in enumerate(fields):
            type_line = f'{indent}  {quote(field.name)} : {{ {gen_type(field.value.type)} }}'
            if i < len(fields) - 1:
                type_line += ","
            code += type_line
        code += f'{indent}}},'  # close properties
        if struct_def.has_key:
            code += f'{indent}"key" : {quote(struct_def.get_key_field().name)},'
        if struct_def.fixed:
            code += f'{indent}"struct" : true,'
        else:
            code += f'{indent}"table" : true,'
        required = [quote(field.name) for field in fields if field.required]
        if required:
            code += f'{indent}"required" : [{_separated(required)}],'
        code += f'{indent}"additionalProperties" : false'
        code += self._close_entry(entries_after)

    def _definition_writers(self):
        """Enum, union and struct entries in emission order, as (writer, definition) pairs."""
        writers = []
        for enum_def in self.parser.enums:
            writers.append((self._write_enum, enum_def))
            if enum_def.is_union:
                writers.append((self._write_union, enum_def))
        for struct_def in self.parser.structs:
            writers.append((self._write_struct, struct_def))
        return writers

    def to_string(self) -> str:
        """Build the schema document text without writing it."""
        root = self.parser.root_struct_def
        if root is None:
            raise ValueError("Cannot generate a JSON schema without a root type")
        code = self.code
        code.clear()
        writers = self._definition_writers()
        code += "{"
        code += f'  "$schema": "{SCHEMA_DRAFT}",'
        code += '  "definitions": {'
        self._write_integer_primitives(len(DECIMAL_INFOS) + len(writers))
        self._write_decimal_primitives(len(writers))
        for i, (writer, definition) in enumerate(writers):
            writer(definition, len(writers) - 1 - i)
        code += "  },"  # close definitions
        # mark root type
        code += f'  "$ref" : "#/definitions/{gen_full_name(root)}"'
        code += "}"  # close schema root
        return code.to_string()

    def generate(self) -> bool:
        """
        Generate the JSON schema file.

        Returns:
            bool: True if generation was successful, False otherwise
        """
        if self.verbose:
            print(f"Generating JSON schema output in: {self.path}")
        final_code = self.to_string()
        file_path = self.generated_file_name()
        if not self.save(final_code):
            print(f"Error generating JSON schema output: could not write {file_path}")
            return False
        if self.verbose:
            print(f"Generated JSON schema file: {file_path}")
        return True


def generate_json_schema(parser: Parser, path: str, file_name: str, verbose: bool = False) -> bool:
    generator = JsonSchemaGenerator(parser, path, file_name, verbose)
    return generator.generate()
