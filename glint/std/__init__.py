from glint.builtin_function import FunctionSignature
from glint.std.collection import populate_collection_functions
from glint.std.math import populate_math_functions
from types import MappingProxyType
from typing import Mapping


def populate_standard_functions() -> Mapping[str, FunctionSignature]:
    """Fresh read-only registry holding every standard built-in."""
    functions = {}
    functions.update(populate_math_functions())
    functions.update(populate_collection_functions())
    return MappingProxyType(functions)
