from __future__ import annotations

import abc
import os
import sys

from .errors import InputOpenError, InputReadError


class InputReader:
    """
    Iterator over the raw (bytes) lines of a log input. Use get_reader() to select
    the reader subclass for a given input name; None or "-" selects stdin.
    """
    @classmethod
    def get_reader(cls, name: str | None) -> InputReader:
        for subcls in cls.__subclasses__():
            if subcls is BinaryFileReader:
                continue
            if subcls._can_read(name):
                return subcls(name)
        return BinaryFileReader(name)

    @classmethod
    @abc.abstractmethod
    def _can_read(cls, name: str | None) -> bool:
        """Override in subclasses"""

    @abc.abstractmethod
    def _close_reader(self):
        """Override in subclasses"""

    def __init__(self, file_name: str | None):
        self.file_name = file_name
        self._iter = iter(())

    @property
    def display_name(self) -> str:
        return os.path.basename(self.file_name)

    def __iter__(self):
        return self

    def __next__(self) -> bytes:
        try:
            return next(self._iter)
        except StopIteration:
            self._close_reader()
            raise
        except OSError as exc:
            self._close_reader()
            raise InputReadError("reading input", exc) from exc


class BinaryFileReader(InputReader):
    @classmethod
    def _can_read(cls, name: str | None) -> bool:
        return bool(name)

    def __init__(self, name: str):
        super().__init__(name)
        try:
            self._close_obj = open(self.file_name, "rb")
        except OSError as exc:
            raise InputOpenError("cannot open input file", exc) from exc
        self._iter = iter(self._close_obj)

    def _close_reader(self):
        self._close_obj.close()


class StdinReader(InputReader):
    @classmethod
    def _can_read(cls, name: str | None) -> bool:
        return not name or name == "-"

    def __init__(self, name: str | None = None):
        super().__init__(None)
        # stdin is read once and left open for the interpreter to close
        self._iter = iter(sys.stdin.buffer)

    @property
    def display_name(self) -> str:
        return "stdin"

    def _close_reader(self):
        pass
