# -*- encoding: utf-8 -*-
# @File   : consts.py
# @Time   : 2024/10/12 20:31:47
# @Author : Kariko Lin

from enum import Enum

DEFAULT_COMMENT_START = ';'
DEFAULT_ESCAPE = '|'
DEFAULT_SEPARATOR = '='
DEFAULT_SECTION_START = '['
DEFAULT_SECTION_END = ']'

# designators of escaped line breaks, i.e. `|n` and `|r`.
LF_DESIGNATOR = 'n'
CR_DESIGNATOR = 'r'


class IniReaderError(int, Enum):
    """Per-line structural error reported by `IniReader.error`."""
    NONE = 0
    INVALID_SECTION_NAME = 1
    INVALID_VALUE_NAME = 2


class IniSectionAddMode(int, Enum):
    """Where `IniDocument.add_section()` puts the new entries."""
    APPEND_END = 0  # always a new header at the very end
    APPEND_SAME = 1  # new header right after the last same-named run
    MERGE_SAME = 2  # no new header, join the last same-named run
