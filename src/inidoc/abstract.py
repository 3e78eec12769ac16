# -*- encoding: utf-8 -*-
# @File   : abstract.py
# @Time   : 2024/09/08 20:22:30
# @Author : Kariko Lin

from abc import ABCMeta, abstractmethod
from types import TracebackType
from typing import IO, Self, TypeVar

T = TypeVar('T')


class StreamHandler(metaclass=ABCMeta):
    """Holds a text stream until `close()`.

    The wrapped stream is closed together with the handler,
    unless `keep_open=True` was given.
    """

    def __init__(self, stream: IO[str], keep_open: bool = False) -> None:
        if stream is None:
            raise TypeError('stream must not be None')
        self._stream: IO[str] | None = stream
        self._keep_open = keep_open

    @property
    def closed(self) -> bool:
        return self._stream is None

    @property
    def stream(self) -> IO[str] | None:
        """The wrapped stream, or `None` once closed."""
        return self._stream

    def _release(self, stream: IO[str]) -> None:
        """Last chance to touch the stream before it is dropped."""

    def close(self) -> None:
        if self._stream is None:
            return
        stream, self._stream = self._stream, None
        try:
            self._release(stream)
        finally:
            if not self._keep_open:
                stream.close()

    @abstractmethod
    def _verify_open(self) -> IO[str]:
        raise NotImplementedError

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None
    ) -> None:
        self.close()


class SerializedComponents[T](metaclass=ABCMeta):
    @abstractmethod
    def next(self) -> bool:
        raise NotImplementedError

    @property
    @abstractmethod
    def current(self) -> T:
        raise NotImplementedError

    @abstractmethod
    def __str__(self) -> str:
        raise NotImplementedError


class FileHandler[T](metaclass=ABCMeta):
    def __init__(self, filename: str) -> None:
        self._fn = filename

    @abstractmethod
    def read(self) -> T:
        raise NotImplementedError

    @abstractmethod
    def write(self, instance: T) -> None:
        raise NotImplementedError

    def __str__(self) -> str:
        return self._fn
