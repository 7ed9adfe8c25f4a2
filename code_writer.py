"""
code_writer.py
Line-oriented text accumulator used by the generators, plus the file save helper.
"""
import os
from typing import List


class CodeWriter:
    """
    Collects generated output one line at a time. `writer += "text"` appends a line;
    to_string() joins everything with a trailing newline after each line.
    """
    def __init__(self):
        self._lines: List[str] = []

    def __iadd__(self, line: str) -> 'CodeWriter':
        self._lines.append(line)
        return self

    def clear(self):
        self._lines = []

    def __len__(self):
        return len(self._lines)

    def to_string(self) -> str:
        return ''.join(line + "\n" for line in self._lines)


def save_file(path: str, contents: str) -> bool:
    """
    Write contents to path in one call, replacing any existing file.

    Returns:
        bool: True if the file was written, False otherwise
    """
    try:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, 'w', encoding='utf-8', newline='') as f:
            f.write(contents)
        return True
    except OSError as e:
        print(f"Error writing file {path}: {e}")
        return False
