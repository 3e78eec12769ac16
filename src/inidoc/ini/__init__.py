# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/10/10 01:16:53
# @Author : Kariko Lin

from .consts import IniReaderError, IniSectionAddMode
from .document import IniDocument
from .errors import IniClosedError, IniParsingException
from .model import (
    CommentElement,
    IniElement,
    NameMapping,
    SectionElement,
    TextElement,
    ValueElement
)
from .parser import IniParser
from .rw import IniReader, IniReadRecord, IniWriter
from .settings import IniReaderSettings, IniSettings, IniWriterSettings
