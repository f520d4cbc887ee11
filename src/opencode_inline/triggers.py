"""Generation-tagged registry of triggers and user commands."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from loguru import logger


@dataclass(frozen=True)
class CommandInvocation:
    """Arguments of one user command call."""

    args: str = ""
    line1: int = 1
    line2: int = 1
    range_count: int = 0


@dataclass(frozen=True)
class Trigger:
    """One key sequence bound to a handler."""

    mode: str
    lhs: str
    handler: Callable[[], object]
    description: str
    generation: int


@dataclass(frozen=True)
class UserCommand:
    """One named command bound to a handler."""

    name: str
    handler: Callable[[CommandInvocation], object]
    description: str
    generation: int


class TriggerBinder(Protocol):
    """Host side of trigger registration."""

    def bind(self, trigger: Trigger) -> None: ...

    def unbind(self, trigger: Trigger) -> None: ...


class TriggerRegistry:
    """Registry whose entries all belong to the current generation.

    `begin_generation()` unbinds everything registered before it, so no
    trigger from an older setup survives a reconfiguration.
    """

    def __init__(self, binder: TriggerBinder | None = None) -> None:
        self._binder = binder
        self._generation = 0
        self._triggers: dict[tuple[str, str], Trigger] = {}
        self._commands: dict[str, UserCommand] = {}

    @property
    def generation(self) -> int:
        return self._generation

    def begin_generation(self) -> int:
        """Drop every entry of the previous generation and start a new one."""

        stale = list(self._triggers.values())
        for trigger in stale:
            self._unbind(trigger)
        self._triggers = {}
        self._commands = {}
        self._generation += 1
        logger.debug("trigger.clear generation={} removed={}", self._generation, len(stale))
        return self._generation

    def register(
        self,
        mode: str,
        lhs: str,
        handler: Callable[[], object],
        *,
        description: str,
    ) -> Trigger:
        trigger = Trigger(mode=mode, lhs=lhs, handler=handler, description=description, generation=self._generation)
        self._triggers[(mode, lhs)] = trigger
        if self._binder is not None:
            self._binder.bind(trigger)
        logger.debug("trigger.register mode={} lhs={} generation={}", mode, lhs, self._generation)
        return trigger

    def register_command(
        self,
        name: str,
        handler: Callable[[CommandInvocation], object],
        *,
        description: str,
    ) -> UserCommand:
        command = UserCommand(name=name, handler=handler, description=description, generation=self._generation)
        self._commands[name] = command
        return command

    def get(self, mode: str, lhs: str) -> Trigger | None:
        return self._triggers.get((mode, lhs))

    def fire(self, mode: str, lhs: str) -> object:
        trigger = self.get(mode, lhs)
        if trigger is None:
            raise KeyError(f"{mode}:{lhs}")
        return trigger.handler()

    def run_command(self, name: str, invocation: CommandInvocation) -> object:
        command = self._commands.get(name)
        if command is None:
            raise KeyError(name)
        return command.handler(invocation)

    def triggers(self) -> list[Trigger]:
        return sorted(self._triggers.values(), key=lambda item: (item.mode, item.lhs))

    def commands(self) -> list[UserCommand]:
        return sorted(self._commands.values(), key=lambda item: item.name)

    def _unbind(self, trigger: Trigger) -> None:
        if self._binder is None:
            return
        try:
            self._binder.unbind(trigger)
        except Exception:
            logger.opt(exception=True).warning("trigger.unbind_failed mode={} lhs={}", trigger.mode, trigger.lhs)
