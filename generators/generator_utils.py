"""
Shared utilities for the schema generators.
Handles native type mapping, qualified definition names and JSON string quoting.
"""
import json
from typing import Any

from idl_model import BaseType

# --- Type Mapping ---
BASE_TYPE_TO_JSON = {
    BaseType.BOOL: 'boolean',
    BaseType.CHAR: 'integer',
    BaseType.UCHAR: 'integer',
    BaseType.SHORT: 'integer',
    BaseType.USHORT: 'integer',
    BaseType.INT: 'integer',
    BaseType.UINT: 'integer',
    BaseType.LONG: 'integer',
    BaseType.ULONG: 'integer',
    BaseType.FLOAT: 'number',
    BaseType.DOUBLE: 'number',
    BaseType.STRING: 'string',
}

def gen_native_type(base_type: BaseType) -> str:
    """Map a base type to its JSON Schema type name, or '' if it has none."""
    return BASE_TYPE_TO_JSON.get(base_type, '')

# --- Name Resolution ---
def gen_full_name(definition: Any) -> str:
    """Flatten namespace components and the local name into one '_' separated identifier."""
    components = definition.defined_namespace.components
    return ''.join(ns + '_' for ns in components) + definition.name

def gen_type_ref(definition: Any, suffix: str = '') -> str:
    return f'"$ref" : "#/definitions/{gen_full_name(definition)}{suffix}"'

# --- Quoting ---
def quote(text: str) -> str:
    """Quote text as a JSON string literal."""
    return json.dumps(text, ensure_ascii=False)
