from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from threading import local
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Type, Union

__all__ = ["TRACE", "LoggingDescriptor"]


class LoggerError(Exception):
    pass


TRACE = logging.DEBUG - 6
logging.addLevelName(TRACE, "TRACE")


class _MeasureContexts(local):
    def __init__(self) -> None:
        super().__init__()
        self.depths: Dict[str, int] = {}


_measure_contexts = _MeasureContexts()


class LoggingDescriptor:
    """Lazily created logger bound to the module or class it is declared in.

    Messages may be given as callables, they are only evaluated if the level is enabled:

        class Walker:
            _logger = LoggingDescriptor()

            def walk(self) -> None:
                self._logger.debug(lambda: f"walking {self.root}")
    """

    __name: Optional[str] = None
    __owner: Any = None
    __logger: Optional[logging.Logger] = None

    def __init__(self, *, name: Optional[str] = None) -> None:
        self.__name = name

    @property
    def logger(self) -> logging.Logger:
        if self.__logger is None:
            if self.__name is not None:
                self.__logger = logging.getLogger(self.__name)
            elif self.__owner is not None:
                self.__logger = logging.getLogger(self.__owner.__module__ + "." + self.__owner.__qualname__)
            else:
                raise LoggerError("Logger needs a name or an owner class")

        return self.__logger

    def __set_name__(self, owner: Any, name: str) -> None:
        self.__owner = owner

    def __get__(self, obj: Any, objtype: Type[Any]) -> LoggingDescriptor:
        return self

    def log(
        self,
        level: int,
        msg: Any,
        condition: Optional[Callable[[], bool]] = None,
        *args: Any,
        stacklevel: int = 2,
        context_name: Optional[str] = None,
        extra: Optional[Mapping[str, object]] = None,
        **kwargs: Any,
    ) -> None:
        if not self.is_enabled_for(level):
            return

        if condition is not None and not condition():
            return

        depth = _measure_contexts.depths.get(context_name, 0) if context_name is not None else 0
        if depth > 0:
            extra = {**extra} if extra is not None else {}
            if "indent" not in extra:
                extra["indent"] = "  " * depth

        self.logger.log(
            level,
            msg() if callable(msg) else msg,
            *args,
            stacklevel=stacklevel,
            extra=extra,
            **kwargs,
        )

    def trace(
        self,
        msg: Union[str, Callable[[], str]],
        condition: Optional[Callable[[], bool]] = None,
        *args: Any,
        stacklevel: int = 3,
        context_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        return self.log(TRACE, msg, condition, *args, stacklevel=stacklevel, context_name=context_name, **kwargs)

    def debug(
        self,
        msg: Union[str, Callable[[], str]],
        condition: Optional[Callable[[], bool]] = None,
        *args: Any,
        stacklevel: int = 3,
        context_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        return self.log(
            logging.DEBUG, msg, condition, *args, stacklevel=stacklevel, context_name=context_name, **kwargs
        )

    @contextmanager
    def measure_time(
        self,
        msg: Union[str, Callable[[], str]],
        *,
        level: int = logging.DEBUG,
        context_name: Optional[str] = None,
    ) -> Iterator[None]:
        if not self.is_enabled_for(level):
            yield
            return

        depths = _measure_contexts.depths
        depth = depths.get(context_name, 0) if context_name is not None else 0

        self.log(level, lambda: f"Start {msg() if callable(msg) else msg}", None, context_name=context_name)

        if context_name is not None:
            depths[context_name] = depth + 1

        start_time = time.monotonic()
        try:
            yield
        finally:
            duration = time.monotonic() - start_time

            if context_name is not None:
                depths[context_name] = depth

            self.log(
                level,
                lambda: f"End {msg() if callable(msg) else msg} took {duration:.4f} seconds",
                None,
                context_name=context_name,
            )

    def is_enabled_for(self, level: int) -> bool:
        return self.logger.isEnabledFor(level)

    @property
    def name(self) -> str:
        return self.logger.name

    def __repr__(self) -> str:
        logger = self.logger
        level = logging.getLevelName(logger.getEffectiveLevel())
        return f"{self.__class__.__name__}(name={logger.name!r}, level={level!r})"
