from glint.builtin_function import BoundArguments, FunctionSignature
from glint.types import DictVal, IntVal, ListVal, StrVal, Value
from typing import Dict


def populate_collection_functions() -> Dict[str, FunctionSignature]:

        def std_len(bound: BoundArguments) -> Value:
            arg = bound.argument('collection')
            value = arg.value
            if isinstance(value, ListVal):
                return IntVal(len(value.items))
            if isinstance(value, DictVal):
                return IntVal(len(value.entries))
            if isinstance(value, StrVal):
                return IntVal(len(value.value))
            raise bound.type_error(arg, 'a list, dictionary or string')

        return {
            'len': FunctionSignature('len', ('collection',), std_len,
                                     doc='number of elements, entries or characters'),
        }
