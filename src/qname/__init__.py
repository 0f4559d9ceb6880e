from .core import QualifiedName, ROOT
from .exceptions import QualifiedNameError, InvalidSegmentError, SegmentIndexError
from .nested import resolve, flatten, inflate
from .config import NameFormat, DEFAULT_FORMAT, load_format_from_path

__all__ = [
    "QualifiedName",
    "ROOT",
    "QualifiedNameError",
    "InvalidSegmentError",
    "SegmentIndexError",
    "resolve",
    "flatten",
    "inflate",
    "NameFormat",
    "DEFAULT_FORMAT",
    "load_format_from_path",
]
