from .variables import (
    VariableRegistry, ReadWriteLock, get_registry, register, lookup, clear, size
)

__all__ = [
    'VariableRegistry', 'ReadWriteLock', 'get_registry',
    'register', 'lookup', 'clear', 'size'
]
