# -*- encoding: utf-8 -*-
# @File   : model.py
# @Time   : 2024/10/10 00:57:10
# @Author : Kariko Lin

"""
INI elements, i.e. what a single logical line of an INI file stands for.

Elements hold *decoded* text. Escaping is none of their business,
see `ini.codec` for that.
"""

from collections.abc import Callable, Hashable, Iterable, Mapping, MutableMapping
from dataclasses import dataclass
from typing import Iterator, TypeVar

V = TypeVar('V')

type NameKey = Callable[[str], Hashable]


def is_blank(text: str | None) -> bool:
    return text is None or not text.strip()


def check_name(name: str | None, argname: str = 'name') -> str:
    """Section and value names must be non-blank strings."""
    if not isinstance(name, str) or is_blank(name):
        raise ValueError(f'`{argname}` 不能为空，实际为 {name!r}。')
    return name


@dataclass
class SectionElement:
    """`[name]`，小节头。"""
    name: str

    def __post_init__(self) -> None:
        check_name(self.name)

    def __str__(self) -> str:
        return f'[{self.name}]'


@dataclass
class ValueElement:
    """`name=value`，键值对。值可以原地修改，不影响它在文档中的位置。"""
    name: str
    value: str = ''

    def __post_init__(self) -> None:
        check_name(self.name)
        if self.value is None:
            self.value = ''

    def __str__(self) -> str:
        return f'{self.name}={self.value}'


@dataclass
class CommentElement:
    """注释。连续多行注释读进来后会合并成一个，行间用换行符连接。"""
    text: str = ''

    def __post_init__(self) -> None:
        if self.text is None:
            self.text = ''

    def __str__(self) -> str:
        return self.text


@dataclass
class TextElement:
    """既不是小节头、注释，也不是键值对的行（比如空行）。"""
    text: str = ''

    def __post_init__(self) -> None:
        if self.text is None:
            self.text = ''

    def __str__(self) -> str:
        return self.text


IniElement = SectionElement | ValueElement | CommentElement | TextElement


class NameMapping[V](MutableMapping[str, V]):
    """按“名字”索引的字典，名字是否相同由`key`函数决定（默认不分大小写）。

    迭代时给出的是每个名字*第一次*出现时的写法。
    """

    def __init__(
        self,
        key: NameKey = str.casefold,
        pairs: Mapping[str, V] | Iterable[tuple[str, V]] = ()
    ) -> None:
        self._key = key
        self.__data: dict[Hashable, V] = {}
        # to maintain original spelling of names
        self.__keyproxy: dict[Hashable, str] = {}
        self.update(pairs)

    def __getitem__(self, name: str) -> V:
        return self.__data[self._key(name)]

    def __setitem__(self, name: str, value: V) -> None:
        k = self._key(name)
        self.__keyproxy.setdefault(k, name)
        self.__data[k] = value

    def __delitem__(self, name: str) -> None:
        k = self._key(name)
        del self.__data[k]
        del self.__keyproxy[k]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._key(name) in self.__data

    def __iter__(self) -> Iterator[str]:
        return iter(self.__keyproxy.values())

    def __len__(self) -> int:
        return len(self.__data)

    def __repr__(self) -> str:
        return f'{type(self).__name__}({dict(self.items())!r})'
