'''Errors raised by the election machinery.

All of them derive from :class:`ElectionError` so that callers can catch
every failure of an election execution at once. No error is ever raised
after a partial result has been handed out; an execution either returns a
complete and consistent result or raises one of these.
'''

from typing import Optional


class ElectionError(Exception):
    '''A common base for all election failures.'''
    pass


class ValidationError(ElectionError):
    '''Input data or configuration is malformed or inconsistent.

    E.g. no candidates, duplicate identifiers, a nomination of a candidate
    that does not exist or a malformed override directive.

    :param message: Human-readable description of the problem.
    :param field: Name of the offending input field, if it can be pinpointed.
    '''
    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        full_message = f'Validation error: {message}'
        if field is not None:
            full_message += f' (field: {field})'
        super().__init__(full_message)


class InsufficientCandidates(ElectionError):
    '''More validators were requested than there are candidates.

    Kept apart from :class:`ValidationError` so that callers may react to it
    specifically, e.g. by retrying with a smaller active set.

    :param requested: Requested active set size.
    :param available: Number of candidates available.
    '''
    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(
            f'Insufficient candidates: requested {requested},'
            f' available {available}'
        )


class AlgorithmError(ElectionError):
    '''An election algorithm failed or broke one of its invariants.

    :param message: Human-readable description of the failure.
    :param algorithm: Name of the algorithm that failed.
    '''
    def __init__(self, message: str, algorithm: str):
        self.message = message
        self.algorithm = algorithm
        super().__init__(
            f'Algorithm error: {message} (algorithm: {algorithm})'
        )


class InvalidData(ElectionError):
    '''A persisted or serialized structure could not be interpreted.'''
    def __init__(self, message: str):
        self.message = message
        super().__init__(f'Invalid data: {message}')
