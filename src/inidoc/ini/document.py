# -*- encoding: utf-8 -*-
# @File   : document.py
# @Time   : 2024/10/13 15:02:38
# @Author : Kariko Lin

"""
INI document, as an ordered and mutable list of elements.

Unlike a dict-of-dicts model, nothing gets lost here: comments, free text,
duplicated names and even duplicated sections survive a load-save cycle.

An element belongs to the nearest `[section]` before it. Elements before
the first header form the *default section*, which every method here
takes as `section=None` (an empty string works as well).

    ```ini
    a=1      ; default section
    [S]
    b=2      ; first run of S
    [S]
    c=3      ; second run of S, independent from the first one
    ```
"""

import logging
from collections.abc import (
    Callable,
    Hashable,
    Iterable,
    Iterator,
    Mapping,
    MutableSequence,
    Sequence
)
from contextlib import contextmanager
from dataclasses import replace
from io import StringIO
from typing import Any, NamedTuple, overload

from .consts import IniReaderError, IniSectionAddMode
from .errors import IniParsingException
from .model import (
    CommentElement,
    IniElement,
    NameKey,
    NameMapping,
    SectionElement,
    TextElement,
    ValueElement,
    check_name
)
from .rw import IniReader, IniWriter
from .settings import IniReaderSettings, IniWriterSettings

logger = logging.getLogger(__name__)

type SectionValues = Mapping[str, str | Sequence[str] | None]

_DEFAULT_SECTION = object()


class _Run(NamedTuple):
    """A section header with everything up to the next one, as a slice."""
    name: str | None
    start: int
    stop: int


def _section_arg(section: str | None) -> str | None:
    return section or None


def _iter_pairs(values: SectionValues) -> Iterator[tuple[str, str]]:
    for k, v in values.items():
        if v is None or isinstance(v, str):
            yield k, v or ''
            continue
        for i in v:
            yield k, i


class IniDocument(MutableSequence[IniElement]):
    """INI 文档。本身就是一个元素列表，顺序即文件中的顺序。

    小节名、键名是否“相同”由构造时传入的`key`函数决定，
    默认`str.casefold`（不分大小写）。只传一个时两者共用。

    注意：文档不是线程安全的。
    """

    def __init__(
        self,
        section_name_key: NameKey = str.casefold,
        value_name_key: NameKey | None = None
    ) -> None:
        self.section_name_key = section_name_key
        self.value_name_key = value_name_key or section_name_key
        self.__elements: list[IniElement] = []

    # region sequence protocol
    @staticmethod
    def __check_element(value: object) -> IniElement:
        if not isinstance(value, IniElement):
            raise TypeError(f'Not an INI element: {value!r}')
        return value

    @overload
    def __getitem__(self, index: int) -> IniElement: ...

    @overload
    def __getitem__(self, index: slice) -> list[IniElement]: ...

    def __getitem__(self, index: int | slice) -> IniElement | list[IniElement]:
        return self.__elements[index]

    def __setitem__(self, index: Any, value: Any) -> None:
        if isinstance(index, slice):
            value = [self.__check_element(i) for i in value]
        else:
            self.__check_element(value)
        self.__elements[index] = value

    def __delitem__(self, index: int | slice) -> None:
        del self.__elements[index]

    def __len__(self) -> int:
        return len(self.__elements)

    def insert(self, index: int, value: IniElement) -> None:
        self.__elements.insert(index, self.__check_element(value))

    def clear(self) -> None:
        self.__elements.clear()

    def __repr__(self) -> str:
        return '<IniDocument> { .cnt = %d }' % len(self.__elements)
    # endregion

    # region helpers
    def _same_section(self, name: str | None, other: str | None) -> bool:
        if name is None or other is None:
            return name is other
        return self.section_name_key(name) == self.section_name_key(other)

    def _same_value(self, name: str, other: str) -> bool:
        return self.value_name_key(name) == self.value_name_key(other)

    def _walk(self) -> Iterator[tuple[int, IniElement, str | None]]:
        """Yields each element with its index and owning section name.

        A header is owned by the section it opens.
        """
        owner: str | None = None
        for i, e in enumerate(self.__elements):
            if isinstance(e, SectionElement):
                owner = e.name
            yield i, e, owner

    def _runs(self) -> list[_Run]:
        """Splits into runs. The first one is always the default section,
        possibly empty."""
        runs: list[_Run] = []
        name, start = None, 0
        for i, e in enumerate(self.__elements):
            if isinstance(e, SectionElement):
                runs.append(_Run(name, start, i))
                name, start = e.name, i
        runs.append(_Run(name, start, len(self.__elements)))
        return runs

    def _remove_indices(self, indices: Iterable[int]) -> list[IniElement]:
        drop = set(indices)
        if not drop:
            return []
        removed, kept = [], []
        for i, e in enumerate(self.__elements):
            (removed if i in drop else kept).append(e)
        self.__elements[:] = kept
        return removed

    def _remove_where(self, predicate: Callable[[IniElement], bool]) -> bool:
        return bool(self._remove_indices(
            i for i, e in enumerate(self.__elements) if predicate(e)))

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        backup = list(self.__elements)
        try:
            yield
        except Exception:
            self.__elements[:] = backup
            logger.warning('Bulk update failed, document rolled back.')
            raise
    # endregion

    # region element appenders
    def add_comment(self, text: str | None) -> CommentElement:
        element = CommentElement(text or '')
        self.__elements.append(element)
        return element

    def add_text(self, text: str | None) -> TextElement:
        element = TextElement(text or '')
        self.__elements.append(element)
        return element

    def add_section_header(self, name: str) -> SectionElement:
        element = SectionElement(check_name(name))
        self.__elements.append(element)
        return element

    def add_value(self, name: str, value: str | None = '') -> ValueElement:
        element = ValueElement(check_name(name), value or '')
        self.__elements.append(element)
        return element
    # endregion

    # region queries
    def section_names(self) -> list[str | None]:
        """按出现顺序列出所有不重复的小节名。

        若第一个小节头之前还有别的元素，列表以`None`（默认小节）开头。
        """
        ret: list[str | None] = []
        seen: set[Hashable] = set()
        for e in self.__elements:
            if isinstance(e, SectionElement):
                if (k := self.section_name_key(e.name)) not in seen:
                    seen.add(k)
                    ret.append(e.name)
            elif not ret:
                ret.append(None)
        return ret

    def value_all(self, section: str | None, name: str) -> list[str]:
        """获取某小节（所有同名小节）中某键的全部值，按出现顺序。"""
        check_name(name)
        section = _section_arg(section)
        return [
            e.value for _, e, owner in self._walk()
            if isinstance(e, ValueElement)
            and self._same_section(owner, section)
            and self._same_value(e.name, name)
        ]

    def value(self, section: str | None, name: str) -> str | None:
        """`value_all()`的第一个值，找不到则为`None`。"""
        values = self.value_all(section, name)
        return values[0] if values else None

    def sections_all(
        self, name: str | None
    ) -> list[NameMapping[list[str]]] | None:
        """每一个同名小节各自的键值表（一个键对应全部值）。

        找不到该小节时返回`None`；没有任何键值对的小节不会出现在列表里。
        """
        name = _section_arg(name)
        found = False
        current: NameMapping[list[str]] = NameMapping(self.value_name_key)
        ret = [current]
        matching = name is None
        for e in self.__elements:
            match e:
                case SectionElement(name=header):
                    matching = self._same_section(header, name)
                    if matching:
                        found = True
                        current = NameMapping(self.value_name_key)
                        ret.append(current)
                case ValueElement(name=k, value=v) if matching:
                    found = True
                    current.setdefault(k, []).append(v)
                case _:
                    pass
        if not found:
            return None
        return [i for i in ret if i]

    def sections(self, name: str | None) -> list[NameMapping[str]] | None:
        """同`sections_all()`，但每个键只取第一个值。"""
        found = self.sections_all(name)
        if found is None:
            return None
        return [
            NameMapping(self.value_name_key,
                        ((k, v[0]) for k, v in i.items()))
            for i in found
        ]

    def section_all(self, name: str | None) -> NameMapping[list[str]] | None:
        found = self.sections_all(name)
        if found is None:
            return None
        return found[0] if found else NameMapping(self.value_name_key)

    def section(self, name: str | None) -> NameMapping[str] | None:
        """第一个同名小节的键值表。后面的同名小节不参与。"""
        found = self.sections(name)
        if found is None:
            return None
        return found[0] if found else NameMapping(self.value_name_key)

    def to_dict(self) -> NameMapping[NameMapping[str]]:
        """整个文档的键值表，同名小节合并，同名键取第一个值。

        默认小节以空串`''`为键。
        """
        ret: NameMapping[NameMapping[str]] = NameMapping(
            self.section_name_key)
        for name in self.section_names():
            merged: NameMapping[str] = NameMapping(self.value_name_key)
            for i in self.sections(name) or []:
                for k, v in i.items():
                    merged.setdefault(k, v)
            ret[name or ''] = merged
        return ret

    def to_dict_all(self) -> NameMapping[NameMapping[list[str]]]:
        ret: NameMapping[NameMapping[list[str]]] = NameMapping(
            self.section_name_key)
        for name in self.section_names():
            merged: NameMapping[list[str]] = NameMapping(self.value_name_key)
            for i in self.sections_all(name) or []:
                for k, v in i.items():
                    merged.setdefault(k, []).extend(v)
            ret[name or ''] = merged
        return ret
    # endregion

    # region section level mutations
    def _insert_index(
        self, name: str | None, mode: IniSectionAddMode
    ) -> tuple[int, bool]:
        """Where to put a new section, and whether to omit its header."""
        if name is None:
            for i, e in enumerate(self.__elements):
                if isinstance(e, SectionElement):
                    return i, True
            return len(self.__elements), True

        if mode is IniSectionAddMode.APPEND_END:
            return len(self.__elements), False

        found, in_match, end = False, False, -1
        for i, e in enumerate(self.__elements):
            if isinstance(e, SectionElement):
                if in_match:
                    end = i
                in_match = self._same_section(e.name, name)
                found = found or in_match
        if not found:
            return len(self.__elements), False
        if in_match:
            end = len(self.__elements)
        return end, mode is IniSectionAddMode.MERGE_SAME

    def add_section(
        self,
        name: str | None,
        values: SectionValues,
        mode: IniSectionAddMode = IniSectionAddMode.APPEND_END
    ) -> list[IniElement]:
        """添加一个小节（及其键值对），返回实际插入的元素。

        `values`中每个键可以对应一个字符串，也可以对应一串字符串（同名键多次出现）。

        - `APPEND_END`：总是在文档末尾新开一个小节；
        - `APPEND_SAME`：紧跟在最后一个同名小节之后新开一个小节；
        - `MERGE_SAME`：不新开小节，直接追加到最后一个同名小节的末尾。

        后两种在找不到同名小节时都等同于`APPEND_END`。
        `name`为`None`时总是并入默认小节。
        """
        if values is None:
            raise TypeError('values must not be None')
        name = _section_arg(name)
        index, merge = self._insert_index(name, mode)

        # build everything first, so a bad name changes nothing.
        elements: list[IniElement] = []
        if name is not None and not merge:
            elements.append(SectionElement(name))
        elements.extend(ValueElement(k, v) for k, v in _iter_pairs(values))
        self.__elements[index:index] = elements
        return elements

    def remove_sections(self, name: str | None) -> list[IniElement]:
        """删除所有同名小节（连同小节头），返回被删掉的元素。"""
        name = _section_arg(name)
        return self._remove_indices(
            i for i, _, owner in self._walk()
            if self._same_section(owner, name))

    def remove_empty_sections(
        self, keep_if_text: bool = False, keep_if_comments: bool = False
    ) -> list[str | None]:
        """删除不含键值对的小节，返回被删小节的名字（不重复）。

        `keep_if_text`/`keep_if_comments`为真时，
        含有普通文本/注释的小节也算非空。
        """
        def keeps(e: IniElement) -> bool:
            match e:
                case ValueElement():
                    return True
                case TextElement():
                    return keep_if_text
                case CommentElement():
                    return keep_if_comments
                case SectionElement():
                    return False

        drop: list[int] = []
        ret: list[str | None] = []
        for run in self._runs():
            if run.start == run.stop:
                continue
            if any(keeps(e) for e in self.__elements[run.start:run.stop]):
                continue
            drop.extend(range(run.start, run.stop))
            if not any(self._same_section(run.name, i) for i in ret):
                ret.append(run.name)
        self._remove_indices(drop)
        return ret

    def merge_sections(self) -> None:
        """把同名小节合并成一个，位置取第一次出现处，内容按原顺序拼接。"""
        merged: dict[Hashable, list[IniElement]] = {}
        for run in self._runs():
            part = self.__elements[run.start:run.stop]
            if run.name is None:
                if part:
                    merged.setdefault(_DEFAULT_SECTION, []).extend(part)
                continue
            k = self.section_name_key(run.name)
            if k not in merged:
                merged[k] = part
            else:
                merged[k].extend(part[1:])
        self.__elements[:] = [e for part in merged.values() for e in part]

    def sort_sections(
        self,
        key: Callable[[str], Any] | None = None,
        *,
        reverse: bool = False
    ) -> None:
        """按小节名给小节排序（稳定排序），默认小节始终在最前。"""
        key = key or str.casefold
        head, *rest = self._runs()
        rest.sort(key=lambda r: key(r.name), reverse=reverse)
        elements = self.__elements[head.start:head.stop]
        for run in rest:
            elements.extend(self.__elements[run.start:run.stop])
        self.__elements[:] = elements

    def __sort_runs(
        self,
        runs: Iterable[_Run],
        key: Callable[[str], Any] | None,
        reverse: bool
    ) -> None:
        key = key or str.casefold
        for run in runs:
            # only name-value pairs move, and only among their own slots.
            slots = [
                i for i in range(run.start, run.stop)
                if isinstance(self.__elements[i], ValueElement)
            ]
            ordered = sorted(
                (self.__elements[i] for i in slots),
                key=lambda e: key(e.name), reverse=reverse)
            for i, e in zip(slots, ordered):
                self.__elements[i] = e

    def sort_elements(
        self,
        key: Callable[[str], Any] | None = None,
        *,
        reverse: bool = False
    ) -> None:
        """在每个小节内部按键名排序键值对（稳定排序）。

        小节头、注释和普通文本都留在原位，只有键值对在它们原来占着的位置间换位。
        """
        self.__sort_runs(self._runs(), key, reverse)

    def sort_section_elements(
        self,
        section: str | None,
        key: Callable[[str], Any] | None = None,
        *,
        reverse: bool = False
    ) -> None:
        """同`sort_elements()`，但只处理指定的（所有同名）小节。"""
        section = _section_arg(section)
        self.__sort_runs(
            (i for i in self._runs() if self._same_section(i.name, section)),
            key, reverse)
    # endregion

    # region value level mutations
    def delete_value(self, section: str | None, name: str) -> bool:
        """删除某小节（所有同名小节）中的某键，返回是否删掉了东西。"""
        check_name(name)
        section = _section_arg(section)
        return bool(self._remove_indices(
            i for i, e, owner in self._walk()
            if isinstance(e, ValueElement)
            and self._same_section(owner, section)
            and self._same_value(e.name, name)))

    def set_value(
        self, section: str | None, name: str, value: str | None
    ) -> bool:
        return self.set_value_all(section, name, [value or ''])

    def set_value_all(
        self, section: str | None, name: str, values: Iterable[str | None]
    ) -> bool:
        """把某键的值依次改写成`values`。

        已有的同名键按顺序逐个覆盖，多出来的旧键删掉；
        新值还有剩余时，紧接在最后一个被覆盖的键之后插入。
        一个旧键都没有时，追加到该小节第一次出现的末尾，
        连小节都没有就在文档末尾新建。`values`为空等同`delete_value()`。

        返回原先是否已存在该键。
        """
        check_name(name)
        section = _section_arg(section)
        if isinstance(values, str):
            values = [values]
        pending = [i or '' for i in values]
        if not pending:
            return self.delete_value(section, name)

        found = False
        matching = section is None
        insert_at = -1
        surplus: list[int] = []
        for i, e in enumerate(self.__elements):
            match e:
                case SectionElement(name=header):
                    was_matching = matching
                    matching = self._same_section(header, section)
                    if was_matching and not matching and insert_at == -1:
                        insert_at = i
                case ValueElement(name=k) if (
                        matching and self._same_value(k, name)):
                    found = True
                    if pending:
                        e.value = pending.pop(0)
                        insert_at = i + 1
                    else:
                        surplus.append(i)
                case _:
                    pass

        if pending:
            added: list[IniElement] = [ValueElement(name, v) for v in pending]
            if insert_at != -1:
                self.__elements[insert_at:insert_at] = added
            else:
                if not matching and section is not None:
                    self.__elements.append(SectionElement(section))
                self.__elements.extend(added)
        self._remove_indices(surplus)
        return found

    def set_values(self, section: str | None, values: SectionValues) -> None:
        """用`values`整体替换某小节（所有同名小节先删除，再在末尾重建）。

        要么全部成功，要么文档保持原样。
        """
        if values is None:
            raise TypeError('values must not be None')
        with self._transaction():
            self.remove_sections(section)
            self.add_section(section, values, IniSectionAddMode.APPEND_END)

    def set_values_all(
        self, sections: Mapping[str | None, SectionValues]
    ) -> None:
        """对多个小节执行`set_values()`，整体是一个事务。"""
        if sections is None:
            raise TypeError('sections must not be None')
        with self._transaction():
            for name, values in sections.items():
                self.remove_sections(name)
                self.add_section(name, values, IniSectionAddMode.APPEND_END)
    # endregion

    # region removal of text and comments
    def remove_comments(self) -> bool:
        return self._remove_where(lambda e: isinstance(e, CommentElement))

    def remove_text(self) -> bool:
        return self._remove_where(lambda e: isinstance(e, TextElement))

    def remove_text_and_comments(self) -> bool:
        return self._remove_where(
            lambda e: isinstance(e, (TextElement, CommentElement)))
    # endregion

    # region IO
    def load(self, reader: IniReader) -> None:
        """用`reader`读到的全部元素替换当前内容。

        遇到任何结构错误即抛出`IniParsingException`，文档保持原样。
        """
        if reader is None:
            raise TypeError('reader must not be None')
        elements: list[IniElement] = []
        while reader.read_next():
            if reader.error is not IniReaderError.NONE:
                logger.warning('Load aborted at line %d (%s).',
                               reader.line_number, reader.error.name)
                raise IniParsingException(reader.line_number, reader.error)
            if reader.current is not None:
                elements.append(reader.current)
        self.__elements[:] = elements
        logger.debug('Loaded %d INI elements.', len(elements))

    def loads(
        self, data: str, settings: IniReaderSettings | None = None
    ) -> None:
        if data is None:
            raise TypeError('data must not be None')
        with IniReader(StringIO(data), settings) as r:
            self.load(r)

    def save(self, writer: IniWriter) -> None:
        if writer is None:
            raise TypeError('writer must not be None')
        for e in self.__elements:
            writer.write_element(e)

    def dumps(self, settings: IniWriterSettings | None = None) -> str:
        buf = StringIO()
        with IniWriter(buf, settings, keep_open=True) as w:
            self.save(w)
        return buf.getvalue()
    # endregion

    def copy(self) -> 'IniDocument':
        """深拷贝，元素各自独立，`key`函数沿用。"""
        ret = IniDocument(self.section_name_key, self.value_name_key)
        self.copy_to(ret)
        return ret

    def copy_to(self, other: 'IniDocument') -> None:
        """把本文档所有元素的副本追加到`other`末尾。"""
        if other is None:
            raise TypeError('other must not be None')
        other.extend([replace(e) for e in self.__elements])
