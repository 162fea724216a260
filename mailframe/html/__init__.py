"""HTML passes: document assembly and the table-layout compatibility compiler."""

from .assembler import DocumentAssembler
from .compat_compiler import CompatibilityCompiler
from .markup_tree import Element, parse_fragment

__all__ = ["CompatibilityCompiler", "DocumentAssembler", "Element", "parse_fragment"]
