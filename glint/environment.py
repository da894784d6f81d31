from typing import Dict, ItemsView, List, Optional

from glint.types import Value


class Environment:
    """Flat mapping from variable names to values.

    Glint has a single scope, so there is no parent chain. An environment is
    owned by one interpreter session; assignment always writes here.
    """
    def __init__(self, values: Optional[Dict[str, Value]] = None):
        self.values: Dict[str, Value] = dict(values) if values else {}

    def get(self, name: str) -> Optional[Value]:
        """Return the value bound to `name`, or None when it is unbound."""
        return self.values.get(name)

    def set(self, name: str, value: Value) -> None:
        self.values[name] = value

    def contains(self, name: str) -> bool:
        return name in self.values

    def __contains__(self, name: str) -> bool:
        return name in self.values

    def names(self) -> List[str]:
        return sorted(self.values)

    def items(self) -> ItemsView[str, Value]:
        return self.values.items()

    def clear(self) -> None:
        self.values.clear()

    def __len__(self) -> int:
        return len(self.values)

    def __repr__(self) -> str:
        return f"Environment({', '.join(self.names())})"
