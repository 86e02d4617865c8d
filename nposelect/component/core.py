'''Common functionality for components.

Functions to build registers of named objects and retrievers around them.
There should normally be no need to use these functions directly.
'''

from typing import Any, Callable, Dict, Union


def marker(register: Dict[str, Any],
           name: str,
           ) -> Callable[[Any], Any]:
    '''A registration decorator factory.

    Registers the object under its ``name`` attribute if it has one, under
    its ``__name__`` otherwise.
    '''
    def mark(obj):
        register[getattr(obj, 'name', obj.__name__)] = obj
        return obj
    return mark


def getter(register: Dict[str, Any],
           name: str,
           ) -> Callable[[str], Any]:
    '''A register retriever factory.'''
    def get(key: str) -> Any:
        try:
            return register[key]
        except KeyError:
            raise KeyError(
                f'unknown {name}: {key}, known: ' + ', '.join(register.keys())
            )
    get.__doc__ = f'''Return a {name} by its name.'''
    return get


def constructer(register: Dict[str, Any],
                name: str,
                ) -> Callable[..., Any]:
    '''A register instantiating retriever/passthrough function factory.'''
    get = getter(register, name)

    def construct(definition: Union[str, Any], *args, **kwargs) -> Any:
        if isinstance(definition, str):
            return get(definition)(*args, **kwargs)
        else:
            return definition
    construct.__doc__ = f'''Construct a {name}.

        Instantiate a registered {name} given by its name with the given
        arguments. If an already constructed object is given, pass it
        through unchanged.
        '''
    return construct


def register_functions(*args, **kwargs):
    '''Construct the marker, getter and constructer functions at one call.'''
    return (
        marker(*args, **kwargs),
        getter(*args, **kwargs),
        constructer(*args, **kwargs),
    )
