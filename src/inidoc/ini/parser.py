# -*- encoding: utf-8 -*-
# @File   : parser.py
# @Time   : 2024/10/10 01:04:45
# @Author : Kariko Lin

"""Whole-file INI handling.

Unlike `IniReader`, reading a file is all or nothing: the first broken
line raises `IniParsingException` and nothing is returned.
"""

import logging
from io import StringIO, TextIOBase
from warnings import warn

import chardet

from ..abstract import FileHandler
from .document import IniDocument
from .rw import IniReader, IniWriter
from .settings import IniReaderSettings, IniWriterSettings

logger = logging.getLogger(__name__)


class IniParser(FileHandler[IniDocument]):
    def __init__(
        self,
        filename: str,
        encoding: str | None = None,
        *,
        reader_settings: IniReaderSettings | None = None,
        writer_settings: IniWriterSettings | None = None
    ) -> None:
        super().__init__(filename)
        self._codec = encoding
        self.reader_settings = reader_settings
        self.writer_settings = writer_settings

    def readstream(
        self, buf: TextIOBase, ins: IniDocument | None = None
    ) -> IniDocument:
        """读取解码好的字符串流。

        如没有特殊需求，直接调用`self.read()`便是。
        传入`ins`时，其原有内容会被替换（读取失败则保持不变）。
        """
        if ins is None:
            ins = IniDocument()
        with IniReader(buf, self.reader_settings, keep_open=True) as r:
            ins.load(r)
        return ins

    @staticmethod
    def _decode_file(filename: str) -> StringIO:
        with open(filename, 'rb') as fp:
            raw = fp.read()

        codec = chardet.detect(raw)
        if codec is None or (codec['confidence'] or 0) < 0.8:
            codec = {'encoding': 'utf-8'}

        # fallbacks
        try:
            buf = raw.decode(codec['encoding'] or 'utf-8')
        except UnicodeDecodeError:
            codec = {'encoding': 'gbk'}
            buf = raw.decode('gbk')
        warn(f'`{filename}` 已按猜测的编码 {codec["encoding"]} 读取，'
             '保存前请确认内容无误。')
        return StringIO(buf)

    def read(self) -> IniDocument:
        """读取`IniParser`实例指定的文件。"""
        try:
            # when encoding is None, `open()` would fallback to system default.
            # and when encoding got wrong,
            # just `UnicodeDecodeError` and fallback to `chardet`.
            with open(self._fn, 'r', encoding=self._codec) as fp:
                return self.readstream(fp)
        except UnicodeDecodeError:
            logger.info('%s: cannot decode with %s, guessing.',
                        self._fn, self._codec or 'default encoding')
            return self.readstream(self._decode_file(self._fn))

    def write(self, instance: IniDocument) -> None:
        """保存到*一个* INI 文件，按元素原有顺序逐个写出。"""
        with open(self._fn, 'w', encoding=self._codec) as fp:
            with IniWriter(fp, self.writer_settings, keep_open=True) as w:
                instance.save(w)

    def __str__(self) -> str:
        return "INI file: " + super().__str__() + f"({self._codec})"
