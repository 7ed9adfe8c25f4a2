#!/usr/bin/env python3
"""
fbs2jsonschema

This script reads a parsed FlatBuffers schema (a JSON schema description, see schema_loader.py)
and writes a JSON Schema (draft-04) document describing the same data model, so that JSON
instances of the schema's root table can be validated.

Usage:
    python fbs2jsonschema.py --input <description.json> --output <output_dir> [--output-name <name>] [--stdout] [--verbose] [--help]

Arguments:
    --input, -i       : Path to the JSON schema description
    --output, -o      : Directory where <name>.schema.json will be generated
    --output-name, -n : Base name of the output file without extension
                        (default: the stem of the described .fbs file)
    --stdout          : Print the schema instead of writing it
    --verbose, -v     : Print progress information
    --help, -h        : Show this help message

Environment variables FBS2JS_INPUT_FILE, FBS2JS_OUTPUT_DIR, FBS2JS_OUTPUT_NAME and FBS2JS_VERBOSE
override the corresponding arguments.

Example:
    python fbs2jsonschema.py --input monster.json --output ./generated
    python fbs2jsonschema.py --input monster.json --output ./generated --output-name monster_v2
"""

import argparse
import os
import sys
from typing import Optional

from idl_model import Parser
from schema_loader import SchemaLoadError, load_schema_file
from generators.json_schema_generator import JsonSchemaGenerator


class SchemaConverter:
    """
    Loads a schema description and converts it to a JSON Schema file.
    """

    def __init__(self, input_file: str, output_dir: str, output_name: Optional[str] = None, verbose: bool = False):
        """
        Initialize the converter with input file and output directory.

        Args:
            input_file: Path to the JSON schema description
            output_dir: Directory where the output file will be generated
            output_name: Base name for the output file without extension (default: schema file stem)
            verbose: Whether to print progress information (default: False)
        """
        self.input_file = input_file
        self.output_dir = output_dir
        self.output_name = output_name
        self.verbose = verbose
        self.parser: Optional[Parser] = None

    def load_input_file(self) -> bool:
        """
        Load the schema description.

        Returns:
            bool: True if loading was successful, False otherwise
        """
        try:
            self.parser = load_schema_file(self.input_file)
        except OSError as e:
            print(f"Error: cannot read {self.input_file}: {e}")
            return False
        except SchemaLoadError as e:
            print(f"Error: {e}")
            return False
        if self.output_name is None:
            source = self.parser.file or self.input_file
            self.output_name = os.path.splitext(os.path.basename(source))[0]
        if self.verbose:
            print(f"Loaded {len(self.parser.enums)} enums and {len(self.parser.structs)} structs from {self.input_file}")
        return True

    def _generator(self) -> JsonSchemaGenerator:
        # the generator treats the output path as a prefix
        path = os.path.join(self.output_dir, '') if self.output_dir else ''
        return JsonSchemaGenerator(self.parser, path, self.output_name, self.verbose)

    def generate_json_schema_output(self) -> bool:
        """
        Generate the JSON schema file from the loaded schema.

        Returns:
            bool: True if generation was successful, False otherwise
        """
        if not self.parser:
            print("Error: No schema available. Load input file first.")
            return False
        return self._generator().generate()

    def json_schema_text(self) -> str:
        return self._generator().to_string()


def parse_arguments(argv=None):
    """
    Parse command line arguments.

    Returns:
        argparse.Namespace: Parsed command line arguments
    """
    parser = argparse.ArgumentParser(
        description="Convert a parsed FlatBuffers schema to a JSON Schema (draft-04) document",
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument('--input', '-i', help='Path to the JSON schema description')
    parser.add_argument('--output', '-o', default='.', help='Directory where the output file will be generated')
    parser.add_argument('--output-name', '-n', help='Base name for the output file without extension (default: schema file stem)')
    parser.add_argument('--stdout', action='store_true', help='Print the schema instead of writing it')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose output')

    args = parser.parse_args(argv)

    # Override with environment variables if set
    args.input = os.environ.get('FBS2JS_INPUT_FILE', args.input)
    args.output = os.environ.get('FBS2JS_OUTPUT_DIR', args.output)
    args.output_name = os.environ.get('FBS2JS_OUTPUT_NAME', args.output_name)
    if 'FBS2JS_VERBOSE' in os.environ:
        args.verbose = os.environ['FBS2JS_VERBOSE'].strip().lower() in ('1', 'true', 'yes', 'on')

    if not args.input:
        parser.error("the following arguments are required: --input/-i")
    return args


def main(argv=None):
    """
    Main entry point of the script.
    """
    args = parse_arguments(argv)
    # progress messages would end up inside the printed schema
    verbose = args.verbose and not args.stdout
    converter = SchemaConverter(args.input, args.output, args.output_name, verbose)

    if not converter.load_input_file():
        sys.exit(1)

    if args.stdout:
        sys.stdout.write(converter.json_schema_text())
        return

    if converter.generate_json_schema_output():
        print("JSON schema conversion completed successfully.")
    else:
        print("JSON schema conversion completed with errors.")
        sys.exit(1)


if __name__ == '__main__':
    main()
