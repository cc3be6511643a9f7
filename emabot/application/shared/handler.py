"""Handler interfaces for commands and queries."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from .command import Command
from .query import Query

TCommand = TypeVar("TCommand", bound=Command)
TQuery = TypeVar("TQuery", bound=Query)
TResult = TypeVar("TResult")


class CommandHandler(ABC, Generic[TCommand, TResult]):
    """Executes one command. The tick engine is the only write-side handler."""

    @abstractmethod
    async def handle(self, command: TCommand) -> TResult:
        ...


class QueryHandler(ABC, Generic[TQuery, TResult]):
    """Answers one query with DTOs, inside its own unit of work."""

    @abstractmethod
    async def handle(self, query: TQuery) -> TResult:
        ...
