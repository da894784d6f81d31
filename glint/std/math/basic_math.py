from typing import List, Union

Number = Union[int, float]


class BasicMath:
    """Numeric helpers behind the math built-ins.

    Works on plain Python numbers. An all-integer input gives an integer
    result; a single float makes the result a float.
    """

    def larger(self, a: Number, b: Number) -> Number:
        return a if a >= b else b

    def smaller(self, a: Number, b: Number) -> Number:
        return a if a <= b else b

    def total(self, values: List[Number]) -> Number:
        result: Number = 0
        for v in values:
            result += v
        if any(isinstance(v, float) for v in values):
            return float(result)
        return result

    def product(self, values: List[Number]) -> Number:
        result: Number = 1
        for v in values:
            result *= v
        if any(isinstance(v, float) for v in values):
            return float(result)
        return result
