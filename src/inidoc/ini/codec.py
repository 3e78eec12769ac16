# -*- encoding: utf-8 -*-
# @File   : codec.py
# @Time   : 2024/10/12 21:40:03
# @Author : Kariko Lin

"""Escaping of reserved characters, and line classification.

With the default settings, an escape sequence is `|` followed by one
designator:

    ------------------------------
    sequence | stands for
    ---------|--------------------
    `||`     | `|` itself
    `|n`     | line feed
    `|r`     | carriage return
    `|[`     | `[`
    `|]`     | `]`
    `|;`     | `;`
    `|=`     | `=`

Names escape every reserved character, section names only the brackets,
and values only the escape char and line breaks. Decoding accepts all of
them anywhere, and leaves unknown sequences as they are.
"""

from re import Match, escape
from re import compile as regex

from .consts import CR_DESIGNATOR, LF_DESIGNATOR, IniReaderError
from .model import (
    CommentElement,
    IniElement,
    SectionElement,
    TextElement,
    ValueElement,
    is_blank
)
from .settings import IniSettings


class IniCodec:
    def __init__(self, settings: IniSettings) -> None:
        self.settings = settings
        esc = settings.escape
        general = {
            ord(esc): esc * 2,
            ord('\r'): esc + CR_DESIGNATOR,
            ord('\n'): esc + LF_DESIGNATOR,
        }
        brackets = {
            ord(i): esc + i
            for i in (settings.section_start, settings.section_end)
        }
        names = brackets | {
            ord(i): esc + i
            for i in (settings.comment_start, settings.separator)
        }
        self.__value_table = general
        self.__section_table = general | brackets
        self.__name_table = general | names

        self.__unescape = {
            esc: esc,
            LF_DESIGNATOR: '\n',
            CR_DESIGNATOR: '\r',
            settings.comment_start: settings.comment_start,
            settings.separator: settings.separator,
            settings.section_start: settings.section_start,
            settings.section_end: settings.section_end,
        }
        # left to right and non-overlapping,
        # so `|||=` is `||` + `|=`, never `|` + `||` + `=`.
        self.__sequence = regex(
            escape(esc) + '([' + escape(''.join(self.__unescape)) + '])')

    def encode_name(self, name: str) -> str:
        return name.translate(self.__name_table)

    def encode_section_name(self, name: str) -> str:
        return name.translate(self.__section_table)

    def encode_value(self, value: str) -> str:
        return value.translate(self.__value_table)

    def __resolve(self, m: Match[str]) -> str:
        return self.__unescape[m.group(1)]

    def decode(self, text: str) -> str:
        if self.settings.escape not in text:
            return text
        return self.__sequence.sub(self.__resolve, text)

    def find_separator(self, line: str) -> int:
        """Index of the first separator which is not escaped, or -1."""
        esc, sep = self.settings.escape, self.settings.separator
        i = 0
        while i < len(line):
            if line[i] == esc:
                i += 2
                continue
            if line[i] == sep:
                return i
            i += 1
        return -1

    def classify(self, line: str) -> IniElement | IniReaderError:
        """Tell what a single physical line (without line break) is.

        Never raises: a bad section or value name comes back as
        `IniReaderError` instead of an element.
        """
        s = self.settings
        lstripped = line.lstrip()

        if (lstripped.startswith(s.section_start)
                and line.rstrip().endswith(s.section_end)):
            name = self.decode(line.strip()[1:-1])
            if is_blank(name):
                return IniReaderError.INVALID_SECTION_NAME
            return SectionElement(name)

        if lstripped.startswith(s.comment_start):
            return CommentElement(lstripped[1:])

        if (pos := self.find_separator(line)) == -1:
            return TextElement(line)

        name = self.decode(line[:pos])
        if is_blank(name):
            return IniReaderError.INVALID_VALUE_NAME
        return ValueElement(name, self.decode(line[pos + 1:]))
