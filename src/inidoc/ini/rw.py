# -*- encoding: utf-8 -*-
# @File   : rw.py
# @Time   : 2024/10/10 01:04:45
# @Author : Kariko Lin

"""Forward-only INI reading and writing.

`IniReader` and `IniWriter` work on an already opened text stream, one
element at a time.

Note: the reader NEVER raises on malformed content. A bad line is reported
through `IniReader.error` together with its line number, and the caller
decides whether to go on. Only `IniDocument.load()` turns it into an
`IniParsingException`.
"""

import logging
import os
from re import compile as regex
from typing import IO, Iterator, NamedTuple

from ..abstract import SerializedComponents, StreamHandler
from .codec import IniCodec
from .consts import IniReaderError
from .errors import IniClosedError
from .model import (
    CommentElement,
    IniElement,
    SectionElement,
    TextElement,
    ValueElement,
    check_name
)
from .settings import IniReaderSettings, IniWriterSettings

logger = logging.getLogger(__name__)

_LINE_BREAKS = regex(r'\r\n|\r|\n')


def split_lines(text: str) -> list[str]:
    """Unlike `str.splitlines()`, an empty text is still one (empty) line."""
    return _LINE_BREAKS.split(text)


def _strip_line_break(line: str) -> str:
    if line.endswith('\r\n'):
        return line[:-2]
    if line.endswith(('\n', '\r')):
        return line[:-1]
    return line


class IniReadRecord(NamedTuple):
    """What `IniReader` holds after each successful `read_next()`."""
    line_number: int
    element: IniElement | None
    error: IniReaderError


class IniReader(StreamHandler, SerializedComponents[IniElement | None]):
    """逐行读取 INI 文本流，每次`read_next()`产出一个元素。

    连续的注释行（或连续的普通文本行）会合并成一个元素。

        ```python
        with IniReader(StringIO('[a]\\nb=1')) as r:
            while r.read_next():
                if r.error is IniReaderError.NONE:
                    print(r.line_number, r.current)
        ```
    """

    def __init__(
        self,
        stream: IO[str],
        settings: IniReaderSettings | None = None,
        *,
        keep_open: bool = False
    ) -> None:
        super().__init__(stream, keep_open)
        self.settings = settings or IniReaderSettings()
        self._codec = IniCodec(self.settings)
        self._line_number = 0
        self._current: IniElement | None = None
        self._error = IniReaderError.NONE
        # at most one peeked line
        self._buffer: str | None = None

    @property
    def line_number(self) -> int:
        """1-based number of the last physical line consumed."""
        return self._line_number

    @property
    def current(self) -> IniElement | None:
        """Element produced by the last `read_next()`.

        `None` before the first read and when the last line was an error.
        Keeps its value once the input is exhausted.
        """
        return self._current

    @property
    def error(self) -> IniReaderError:
        return self._error

    def _verify_open(self) -> IO[str]:
        if self._stream is None:
            raise IniClosedError(type(self).__name__)
        return self._stream

    def __peek_line(self) -> str | None:
        if self._buffer is None:
            line = self._verify_open().readline()
            self._buffer = _strip_line_break(line) if line else None
        return self._buffer

    def __read_line(self) -> str | None:
        line = self.__peek_line()
        if line is not None:
            self._buffer = None
            self._line_number += 1
        return line

    def read_next(self) -> bool:
        """Read the next element.

        Returns `False` when nothing is left, `True` otherwise, even if
        the line turned out to be broken (see `self.error`).
        """
        self._verify_open()
        if (line := self.__read_line()) is None:
            return False

        match self._codec.classify(line):
            case IniReaderError() as err:
                self._current, self._error = None, err
                logger.warning(
                    'INI line %d: %s', self._line_number, err.name)
                return True
            case CommentElement() | TextElement() as element:
                self.__coalesce(element)
            case element:
                pass
        self._current, self._error = element, IniReaderError.NONE
        return True

    def __coalesce(self, element: CommentElement | TextElement) -> None:
        while (line := self.__peek_line()) is not None:
            following = self._codec.classify(line)
            if type(following) is not type(element):
                break
            self.__read_line()
            element.text += os.linesep + following.text

    def next(self) -> bool:
        return self.read_next()

    def __iter__(self) -> Iterator[IniReadRecord]:
        while self.read_next():
            yield IniReadRecord(self._line_number, self._current, self._error)

    def __str__(self) -> str:
        return f'IniReader(line {self._line_number})'


class IniWriter(StreamHandler):
    """逐个元素写出 INI 文本。

    第一行之前不写换行，最后一行之后也不写。任何字符串都能被转义，
    所以写出来的东西一定能被`IniReader`原样读回。
    """

    def __init__(
        self,
        stream: IO[str],
        settings: IniWriterSettings | None = None,
        *,
        keep_open: bool = False
    ) -> None:
        super().__init__(stream, keep_open)
        self.settings = settings or IniWriterSettings()
        self._codec = IniCodec(self.settings)
        self._written = False

    def _verify_open(self) -> IO[str]:
        if self._stream is None:
            raise IniClosedError(type(self).__name__)
        return self._stream

    def _release(self, stream: IO[str]) -> None:
        stream.flush()

    def __write(self, text: str) -> None:
        self._verify_open().write(text)
        self._written = True

    def __new_line(self) -> None:
        if self._written:
            self._verify_open().write('\n')

    def flush(self) -> None:
        self._verify_open().flush()

    def write_section(self, name: str) -> None:
        check_name(name)
        self._verify_open()
        s = self.settings
        if s.empty_line_before_section_header:
            self.__new_line()
        self.__new_line()
        self.__write(
            s.section_start + self._codec.encode_section_name(name)
            + s.section_end)

    def write_value(self, name: str, value: str | None) -> None:
        check_name(name)
        self._verify_open()
        self.__new_line()
        self.__write(
            self._codec.encode_name(name) + self.settings.separator
            + self._codec.encode_value(value or ''))

    def write_comment(self, text: str | None) -> None:
        self._verify_open()
        for line in split_lines(text or ''):
            self.__new_line()
            self.__write(self.settings.comment_start + line)

    def write_text(self, text: str | None) -> None:
        self._verify_open()
        for line in split_lines(text or ''):
            self.__new_line()
            self.__write(line)

    def write_element(self, element: IniElement) -> None:
        match element:
            case SectionElement(name=name):
                self.write_section(name)
            case ValueElement(name=name, value=value):
                self.write_value(name, value)
            case CommentElement(text=text):
                self.write_comment(text)
            case TextElement(text=text):
                self.write_text(text)
            case _:
                raise TypeError(f'Not an INI element: {element!r}')

    def __str__(self) -> str:
        return f'IniWriter({"dirty" if self._written else "clean"})'
