"""
MiniLang - a minimal, inspectable front end for a small teaching language.

MiniLang reads source text with typed variable declarations, functions, and
if/while/for blocks, and produces a syntax tree together with structured
diagnostics for malformed input.
"""

from minilang.compiler import ParseResult, parse_source, to_dict, to_json
from minilang.compiler.lexer import Lexer
from minilang.compiler.parser import Parser

__version__ = "0.1.0"
__all__ = [
    "parse_source",
    "ParseResult",
    "Lexer",
    "Parser",
    "to_dict",
    "to_json",
]
