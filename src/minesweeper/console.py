"""
Console input layer.

Turns typed commands into the pointer intents the engine expects,
the same sequence a mouse would produce over the tile.
"""
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from .engine import GameEngine
from .render import render_text


USAGE = (
    "Commands: o X Y (open), f X Y (flag), c X Y (chord), "
    "n [W H M] (new game), r (restart), q (quit)"
)


@dataclass
class Command:
    """A parsed console command."""

    name: str
    args: Tuple[int, ...] = ()


_ARITY = {
    "o": (2,),
    "f": (2,),
    "c": (2,),
    "n": (0, 3),
    "r": (0,),
    "q": (0,),
}


def parse_command(line: str) -> Command:
    """
    Parse one line of input.

    Raises:
        ValueError: Unknown command, wrong number of arguments or
            non-integer arguments.
    """
    parts = line.split()
    if not parts:
        raise ValueError("Empty command")
    name = parts[0].lower()
    if name not in _ARITY:
        raise ValueError(f"Unknown command {name!r}")
    args = tuple(int(part) for part in parts[1:])
    if len(args) not in _ARITY[name]:
        raise ValueError(f"Wrong number of arguments for {name!r}")
    return Command(name, args)


class ConsoleSession:
    """Drive a GameEngine from text commands."""

    def __init__(
        self,
        engine: GameEngine,
        output: Callable[[str], None] = print,
    ) -> None:
        self.engine = engine
        self.output = output

    def execute(self, line: str) -> bool:
        """
        Run one command line.

        Returns:
            False if the session should end, True otherwise.
        """
        try:
            command = parse_command(line)
        except ValueError as error:
            self.output(f"{error}. {USAGE}")
            return True

        if command.name == "q":
            return False
        if command.name == "r":
            self.engine.restart()
        elif command.name == "n":
            self._new_game(command.args)
        else:
            self._tile_gesture(command)
        return True

    def _new_game(self, args: Tuple[int, ...]) -> None:
        if args:
            self.engine.new_game(*args)
        else:
            self.engine.restart()

    def _tile_gesture(self, command: Command) -> None:
        x, y = command.args
        engine = self.engine
        if engine.board.get_tile(x, y) is None:
            self.output(f"({x}, {y}) is off the board")
            return
        engine.pointer_enter_tile(x, y)
        if command.name == "o":
            engine.primary_press()
            engine.primary_release()
        elif command.name == "f":
            engine.secondary_press()
        elif command.name == "c":
            engine.auxiliary_press()
            engine.auxiliary_release()

    def render(self) -> str:
        return render_text(self.engine)

    def run(self, read: Optional[Callable[[str], str]] = None) -> None:
        """Read-eval-print loop until quit or end of input."""
        read = read or input
        self.output(USAGE)
        while True:
            self.output(self.render())
            if self.engine.is_over:
                self.output(f"Game {self.engine.phase.value}. n or r for a new game.")
            try:
                line = read("> ")
            except EOFError:
                break
            if not self.execute(line):
                break
