# -*- encoding: utf-8 -*-
# @File   : errors.py
# @Time   : 2024/10/12 20:40:12
# @Author : Kariko Lin

from .consts import IniReaderError


class IniParsingException(Exception):
    """Raised when a whole INI document could not be loaded.

    Only the document level raises this; `IniReader` itself just
    reports the error and carries on.
    """

    def __init__(self, line_number: int, error: IniReaderError) -> None:
        super().__init__(
            f'INI parsing failed at line {line_number} with error {error.name}')
        self.line_number = line_number
        self.error = error


class IniClosedError(ValueError):
    """I/O operation on a closed INI reader or writer."""

    def __init__(self, handler: str) -> None:
        super().__init__(f'{handler} has already been closed.')
