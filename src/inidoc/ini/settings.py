# -*- encoding: utf-8 -*-
# @File   : settings.py
# @Time   : 2024/10/12 20:36:05
# @Author : Kariko Lin

from dataclasses import dataclass

from .consts import (
    CR_DESIGNATOR,
    DEFAULT_COMMENT_START,
    DEFAULT_ESCAPE,
    DEFAULT_SECTION_END,
    DEFAULT_SECTION_START,
    DEFAULT_SEPARATOR,
    LF_DESIGNATOR
)


@dataclass(kw_only=True)
class IniSettings:
    """INI 读写共用的五个保留字符。

    默认值对应下面这种最常见的写法，每一个都可以单独改掉：

        ```ini
        ; comment
        [section]
        name=value|nwith a line break
        ```
    """
    comment_start: str = DEFAULT_COMMENT_START
    escape: str = DEFAULT_ESCAPE
    separator: str = DEFAULT_SEPARATOR
    section_start: str = DEFAULT_SECTION_START
    section_end: str = DEFAULT_SECTION_END

    def __post_init__(self) -> None:
        tokens = self.tokens()
        for i in tokens:
            if not isinstance(i, str) or len(i) != 1:
                raise ValueError(
                    f'INI tokens must be single characters, got {i!r}.')
            if i.isspace():
                raise ValueError('INI tokens must not be whitespace.')
            if i in (LF_DESIGNATOR, CR_DESIGNATOR):
                raise ValueError(
                    f'{i!r} is reserved for escaped line breaks.')
        if len(set(tokens)) != len(tokens):
            raise ValueError(f'INI tokens must be distinct, got {tokens}.')

    def tokens(self) -> tuple[str, str, str, str, str]:
        return (
            self.escape,
            self.comment_start,
            self.separator,
            self.section_start,
            self.section_end)


@dataclass(kw_only=True)
class IniReaderSettings(IniSettings):
    pass


@dataclass(kw_only=True)
class IniWriterSettings(IniSettings):
    # one extra blank line ahead of every `[section]` but the very first line.
    empty_line_before_section_header: bool = False
