"""
CEINI - Compact INI reader and writer.

Fixed-limit INI grammar: visitor-driven reading and
section-grouping writing through an index accessor.
"""

__version__ = "0.2.0"

from ceini.errors import ErrorKind, IniError, ParseError, WriteError
from ceini.reader import Option, parse, read, iter_options, check
from ceini.writer import OutputBuffer, write, dumps
