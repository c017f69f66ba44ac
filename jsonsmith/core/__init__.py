"""
jsonsmith Core Engine.

This module provides the value model, the parser and the serializer.
"""

from .value import Value, ValueType
from .tokenizer import Lexer, Position
from .engine import parse, Parser
from .serializer import stringify

__all__ = [
    "Value", "ValueType",
    "Lexer", "Position",
    "parse", "Parser",
    "stringify",
]
