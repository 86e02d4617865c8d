'''Dictionary (JSON-ready) serialization of the election model objects.

The model classes store their constructor parameters unchanged as
attributes, so a generic decorator can derive both directions of the
conversion from the constructor signature. Optional values that are absent
(``None`` or empty collections) are left out of the output to keep
persisted fixtures compact.
'''

import inspect
from typing import Any, List, Dict

from nposelect.errors import InvalidData


def simple_serialization(class_: type) -> type:
    '''A decorator to provide to_dict() and from_dict() methods.

    The resulting methods serialize all object attributes corresponding
    to the class's constructor parameter names. Parameters with a default
    value are omitted from the output when they hold an absent value.

    Attributes holding other serializable model objects (or lists of them)
    must be declared in a ``nested_types`` class attribute mapping the
    parameter name to the model class, so that :meth:`from_dict` can
    reconstruct them.

    :param class_: The class to add the methods to.
    '''
    signature = inspect.signature(class_.__init__)
    param_names = [
        name for name in signature.parameters.keys() if name != 'self'
    ]
    required = {
        name for name, param in signature.parameters.items()
        if name != 'self' and param.default is inspect.Parameter.empty
    }
    nested_types = getattr(class_, 'nested_types', {})

    def to_dict(self) -> Dict[str, Any]:
        out_dict = {}
        for attr in param_names:
            value = getattr(self, attr)
            if attr not in required and is_absent(value):
                continue
            out_dict[attr] = serialize_value(value)
        return out_dict

    def from_dict(cls, value: Dict[str, Any]) -> Any:
        if not isinstance(value, dict):
            raise InvalidData(
                f'{cls.__name__} definition must be an object, got {value!r}'
            )
        unknown = [key for key in value.keys() if key not in param_names]
        if unknown:
            raise InvalidData(
                f'unknown {cls.__name__} fields: ' + ', '.join(unknown)
            )
        missing = [name for name in param_names
                   if name in required and name not in value]
        if missing:
            raise InvalidData(
                f'missing {cls.__name__} fields: ' + ', '.join(missing)
            )
        params = {}
        for key, inner_val in value.items():
            if key in nested_types and inner_val is not None:
                params[key] = deserialize_nested(nested_types[key], inner_val)
            else:
                params[key] = inner_val
        return cls(**params)

    class_.to_dict = to_dict
    class_.from_dict = classmethod(from_dict)
    return class_


def is_absent(value: Any) -> bool:
    if value is None:
        return True
    elif isinstance(value, (list, tuple, dict, set, frozenset)):
        return not value
    else:
        return False


def serialize_value(value: Any) -> Any:
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    elif isinstance(value, tuple(ATOMIC_TYPES)):
        return value
    elif hasattr(value, '__iter__'):
        if hasattr(value, 'items') and hasattr(value, 'keys'):
            if all(isinstance(key, str) for key in value.keys()):
                return {
                    key: serialize_value(val)
                    for key, val in value.items()
                }
            else:
                raise ValueError(f'cannot serialize non-string keys of {value!r}')
        else:
            return [serialize_value(val) for val in value]
    else:
        raise ValueError(f'cannot serialize {value!r} to dict format')


def deserialize_nested(class_: type, value: Any) -> Any:
    if isinstance(value, list):
        return [class_.from_dict(item) for item in value]
    else:
        return class_.from_dict(value)


ATOMIC_TYPES: List[type] = [
    str, int, float, bool, type(None),
]
