from .basic_math import BasicMath
from glint.builtin_function import Argument, BoundArguments, FunctionSignature
from glint.errors import integer_overflow
from glint.types import FloatVal, IntVal, Value, fits_int64, is_numeric
from typing import Dict, List


def populate_math_functions() -> Dict[str, FunctionSignature]:
        basic_math = BasicMath()

        def number(bound: BoundArguments, arg: Argument):
            if not is_numeric(arg.value):
                raise bound.type_error(arg, 'a number')
            return arg.value.value

        def wrap(bound: BoundArguments, result) -> Value:
            if isinstance(result, float):
                return FloatVal(result)
            if not fits_int64(result):
                raise integer_overflow(bound.call_span)
            return IntVal(result)

        def std_max(bound: BoundArguments) -> Value:
            a = number(bound, bound.argument('a'))
            b = number(bound, bound.argument('b'))
            # return the original value so max(2, 2.0) keeps its first operand's type
            return bound['a'] if basic_math.larger(a, b) == a else bound['b']

        def std_min(bound: BoundArguments) -> Value:
            a = number(bound, bound.argument('a'))
            b = number(bound, bound.argument('b'))
            return bound['a'] if basic_math.smaller(a, b) == a else bound['b']

        def std_sum(bound: BoundArguments) -> Value:
            values: List = [number(bound, arg) for arg in bound.rest]
            return wrap(bound, basic_math.total(values))

        def std_product(bound: BoundArguments) -> Value:
            values: List = [number(bound, arg) for arg in bound.rest]
            return wrap(bound, basic_math.product(values))

        return {
            'max': FunctionSignature('max', ('a', 'b'), std_max,
                                     doc='the larger of two numbers'),
            'min': FunctionSignature('min', ('a', 'b'), std_min,
                                     doc='the smaller of two numbers'),
            'sum': FunctionSignature('sum', (), std_sum, variadic='values', min_variadic=1,
                                     doc='the sum of one or more numbers'),
            'product': FunctionSignature('product', (), std_product, variadic='values', min_variadic=1,
                                         doc='the product of one or more numbers'),
        }
