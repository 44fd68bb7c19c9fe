from typing import Dict, Iterator, Mapping, Optional, TYPE_CHECKING
from mclang.errors import MclError, ErrorVal

if TYPE_CHECKING:
    from mclang.types import Value


class Environment:
    """Immutable snapshot mapping identifiers to values.

    Nothing ever writes to an existing environment: `insert` and `merge`
    build a new one and leave every previous holder untouched.
    """
    __slots__ = ('_values',)

    def __init__(self, values: Optional[Mapping[str, 'Value']] = None):
        self._values: Dict[str, 'Value'] = dict(values) if values else {}

    @classmethod
    def merge(cls, *envs: 'Environment') -> 'Environment':
        """Combine environments; later ones take precedence over earlier ones."""
        values: Dict[str, 'Value'] = {}
        for env in envs:
            values.update(env._values)
        return cls(values)

    def get(self, name: str) -> 'Value':
        if name in self._values:
            return self._values[name]
        raise MclError(ErrorVal('NameError', f'No variable named {name}'))

    def insert(self, name: str, value: 'Value') -> 'Environment':
        # Replaces an earlier binding for the same name.
        values = dict(self._values)
        values[name] = value
        return Environment(values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Environment):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        inner = ', '.join(f"{k}={v!r}" for k, v in self._values.items())
        return f"Environment({inner})"
