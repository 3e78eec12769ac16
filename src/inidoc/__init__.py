# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/10/10 01:20:11
# @Author : Kariko Lin

import logging

from .ini import (
    CommentElement,
    IniClosedError,
    IniDocument,
    IniElement,
    IniParser,
    IniParsingException,
    IniReader,
    IniReaderError,
    IniReaderSettings,
    IniReadRecord,
    IniSectionAddMode,
    IniSettings,
    IniWriter,
    IniWriterSettings,
    NameMapping,
    SectionElement,
    TextElement,
    ValueElement
)

__all__ = [
    'IniDocument', 'IniParser', 'IniReader', 'IniWriter', 'IniReadRecord',
    'IniElement', 'SectionElement', 'ValueElement',
    'CommentElement', 'TextElement', 'NameMapping',
    'IniSettings', 'IniReaderSettings', 'IniWriterSettings',
    'IniReaderError', 'IniSectionAddMode',
    'IniParsingException', 'IniClosedError'
]

logging.basicConfig(level=logging.INFO,
                    format='[%(asctime)s] %(levelname)s: %(message)s')
