class StructureException(Exception):
    '''Base class to extend in order to throw exception in structure.

    It takes the message and, optionally, the chain of the layers that
    caused the exception (for runtime errors it's [field index, slot index]).
    '''

    def __init__(self, message, chain=None):
        self.message = message
        self.chain = chain if chain is not None else []
        super().__init__(message)


class ConstructionError(StructureException):
    '''The format string itself is wrong: there is nothing to recover
    at runtime, the caller must fix the format.'''

    def __init__(self, message, format=None, position=None):
        self.format = format
        self.position = position
        if position is not None:
            message = '%s (at offset %d of %r)' % (message, position, format)
        super().__init__(message, chain=[position] if position is not None else None)


class UnknownFormatCharacter(ConstructionError):
    pass


class DanglingRepeatCount(ConstructionError):
    pass


class UnterminatedPointerTag(ConstructionError):
    pass


class EmptyPointerTag(ConstructionError):
    pass


class NonNativePointer(ConstructionError):
    pass


class RepeatCountOverflow(ConstructionError):
    pass


class InvalidWordSize(ConstructionError):
    pass


class PackException(StructureException):
    '''Raised by a pack/unpack call, the caller is expected to handle it.'''
    pass


class InvalidInput(PackException, ValueError):
    pass


class LengthMismatch(InvalidInput):
    pass


class TypeMismatch(PackException, TypeError):
    pass


class UnexpectedEOF(PackException, EOFError):
    '''The source ended before the field could be read entirely.'''
    pass


class ShortWrite(PackException, OSError):
    pass
