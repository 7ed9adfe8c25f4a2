"""
Base class for generators that turn a parsed schema into a single output file.
"""
from idl_model import Parser
from code_writer import save_file


class BaseGenerator:
    def __init__(self, parser: Parser, path: str, file_name: str, verbose: bool = False):
        """
        Args:
            parser: The parsed schema to generate from
            path: Output directory; used as a plain prefix, so it should end with a separator
            file_name: Base name of the output file without extension
            verbose: Whether to print progress messages
        """
        self.parser = parser
        self.path = path
        self.file_name = file_name
        self.verbose = verbose

    def generated_file_name(self) -> str:
        raise NotImplementedError("Subclasses must implement generated_file_name()")

    def generate(self) -> bool:
        raise NotImplementedError("Subclasses must implement generate()")

    def save(self, contents: str) -> bool:
        return save_file(self.generated_file_name(), contents)
