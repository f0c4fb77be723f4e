"""Code generators for FlowGUI screen documents."""

from generators.base import DuplicateIdentifierError, encode_color, resolve_position
from generators.dialects import DialectProfile, resolve_dialect
from generators.java_generator import generate_java_code

__all__ = [
    'DialectProfile',
    'DuplicateIdentifierError',
    'encode_color',
    'generate_java_code',
    'resolve_dialect',
    'resolve_position',
]
