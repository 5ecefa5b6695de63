"""
Interactive REPL for the adventure engine.

Provides a text-based interface for playing the starter world.
"""

from __future__ import annotations

import argparse
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, field

from src.cli.parser import CommandParser
from src.content import load_starter_world, starter_config
from src.db import InMemorySaveRepository, JsonFileSaveRepository, SaveRepository
from src.engine import EngineConfig, GameEngine
from src.models.world import World, WorldIntegrityError

logger = logging.getLogger(__name__)

DEFAULT_SLOT = "quicksave"


@dataclass
class SessionState:
    """Current state of the play session."""

    engine: GameEngine
    running: bool = True
    announced_win: bool = False


@dataclass
class SpecialCommand:
    """A REPL command handled outside the engine."""

    name: str
    aliases: list[str]
    description: str
    handler: Callable[[SessionState, list[str]], str | None]


@dataclass
class GameREPL:
    """
    Interactive REPL for playing the adventure.

    Handles user input, special commands, and game output. Special commands
    start with ``/`` (``/save``, ``/restore``); the bare words also work.
    Everything else goes through the CommandParser to the engine.
    """

    world: World
    config: EngineConfig = field(default_factory=EngineConfig)
    repository: SaveRepository = field(default_factory=InMemorySaveRepository)
    parser: CommandParser = field(default_factory=CommandParser)
    commands: dict[str, SpecialCommand] = field(init=False, default_factory=dict)

    def __post_init__(self) -> None:
        self._register_commands()

    def new_session(self) -> SessionState:
        return SessionState(engine=GameEngine(world=self.world, config=self.config))

    def _register_commands(self) -> None:
        """Register all special commands."""
        commands = [
            SpecialCommand(
                name="quit",
                aliases=["exit", "q"],
                description="Exit the game",
                handler=self._cmd_quit,
            ),
            SpecialCommand(
                name="help",
                aliases=["?", "h"],
                description="Show available commands",
                handler=self._cmd_help,
            ),
            SpecialCommand(
                name="save",
                aliases=[],
                description="Save the game (optional slot name)",
                handler=self._cmd_save,
            ),
            SpecialCommand(
                name="restore",
                aliases=["load"],
                description="Restore a saved game (optional slot name)",
                handler=self._cmd_restore,
            ),
            SpecialCommand(
                name="saves",
                aliases=["slots"],
                description="List saved games",
                handler=self._cmd_saves,
            ),
            SpecialCommand(
                name="restart",
                aliases=[],
                description="Start over from the beginning",
                handler=self._cmd_restart,
            ),
        ]
        for cmd in commands:
            self.commands[cmd.name] = cmd
            for alias in cmd.aliases:
                self.commands[alias] = cmd

    # =========================================================================
    # Special Commands
    # =========================================================================

    def _cmd_quit(self, state: SessionState, args: list[str]) -> str | None:
        """Handle quit command."""
        state.running = False
        return state.engine.score.summary()

    def _cmd_help(self, state: SessionState, args: list[str]) -> str | None:
        """Handle help command."""
        lines = ["Available Commands:", "-" * 40]
        seen = set()
        for cmd in self.commands.values():
            if cmd.name not in seen:
                aliases = f" ({', '.join(cmd.aliases)})" if cmd.aliases else ""
                lines.append(f"  /{cmd.name}{aliases} - {cmd.description}")
                seen.add(cmd.name)
        lines.extend(
            [
                "",
                "Tips:",
                "  - Type commands like 'open mailbox', 'take leaflet', 'go north'",
                "  - Directions can be shortened: n, s, e, w, u, d",
                "  - 'look', 'inventory' and 'score' don't use up a turn",
            ]
        )
        return "\n".join(lines)

    def _cmd_save(self, state: SessionState, args: list[str]) -> str | None:
        slot = args[0] if args else DEFAULT_SLOT
        try:
            self.repository.save(slot, state.engine.export_state())
        except (OSError, ValueError) as e:
            logger.warning("Save to %s failed: %s", slot, e)
            return f"Save failed: {e}"
        return f"Game saved to '{slot}'."

    def _cmd_restore(self, state: SessionState, args: list[str]) -> str | None:
        slot = args[0] if args else DEFAULT_SLOT
        try:
            snapshot = self.repository.load(slot)
        except (OSError, ValueError) as e:
            logger.warning("Restore from %s failed: %s", slot, e)
            return f"Restore failed: {e}"
        if snapshot is None:
            return f"There is no saved game called '{slot}'."
        try:
            state.engine.import_state(snapshot)
        except WorldIntegrityError as e:
            logger.warning("Save %s does not fit this world: %s", slot, e)
            return f"That save doesn't belong to this world: {e}"
        state.announced_win = state.engine.is_won
        return f"Game restored from '{slot}'.\n\n{state.engine.describe()}"

    def _cmd_saves(self, state: SessionState, args: list[str]) -> str | None:
        slots = self.repository.list_slots()
        if not slots:
            return "No saved games."
        return "Saved games:\n" + "\n".join(f"  - {slot}" for slot in slots)

    def _cmd_restart(self, state: SessionState, args: list[str]) -> str | None:
        state.engine = GameEngine(world=self.world, config=self.config)
        state.announced_win = False
        return state.engine.describe()

    # =========================================================================
    # Input Handling
    # =========================================================================

    def _split_special(self, text: str) -> tuple[str, list[str]] | None:
        """Name and arguments if input is a special command, else None."""
        explicit = text.startswith("/")
        parts = (text[1:] if explicit else text).split()
        if not parts:
            return None
        name = parts[0].lower()
        if name not in self.commands:
            return None
        return name, parts[1:]

    def process_input(self, text: str, state: SessionState) -> str:
        """Process one line of input and return the text to show."""
        text = text.strip()
        if not text:
            return ""

        special = self._split_special(text)
        if special is not None:
            name, args = special
            return self.commands[name].handler(state, args) or ""

        command = self.parser.parse(text)
        if command is None:
            return ""
        response = state.engine.execute(command)
        output = response.message
        if state.engine.is_won and not state.announced_win:
            state.announced_win = True
            state.running = False
        return output

    def _print_banner(self) -> None:
        """Print the game banner."""
        print("WHITE HOUSE")
        print("A text adventure\n")
        print("Type /help for commands.\n")

    def run(self) -> None:
        """Main loop: read a line, print the response, until quit or EOF."""
        state = self.new_session()
        self._print_banner()
        print(state.engine.describe())
        print()

        while state.running:
            try:
                user_input = input("> ").strip()
                if not user_input:
                    continue
                response = self.process_input(user_input, state)
                if response:
                    print()
                    print(response)
                    print()
            except KeyboardInterrupt:
                print("\n")
                state.running = False
            except EOFError:
                print("\n")
                state.running = False

        print("Thanks for playing!")


def build_repl(save_dir: str | None = None, **config_overrides: object) -> GameREPL:
    """
    Wire the starter world, config from the environment, and a save store.

    Args:
        save_dir: Directory for JSON saves; in-memory saves when None
        **config_overrides: EngineConfig fields that win over the environment
    """
    repository: SaveRepository
    if save_dir:
        repository = JsonFileSaveRepository(save_dir)
    else:
        repository = InMemorySaveRepository()
    return GameREPL(
        world=load_starter_world(),
        config=starter_config(**config_overrides),
        repository=repository,
    )


def run_game(save_dir: str | None = None, battery_life: int | None = None) -> None:
    """
    Run the adventure.

    Args:
        save_dir: Directory for save files (defaults to in-memory saves)
        battery_life: Lantern battery in turns (defaults to config/env)
    """
    overrides: dict[str, object] = {}
    if battery_life is not None:
        overrides["battery_life"] = battery_life
    build_repl(save_dir, **overrides).run()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="White House Text Adventure")
    parser.add_argument(
        "--save-dir",
        default=os.getenv("ADVENTURE_SAVE_DIR"),
        help="Directory for save files (default: keep saves in memory)",
    )
    parser.add_argument("--battery-life", type=int, default=None, help="Lantern battery in turns")
    parser.add_argument(
        "--log-level",
        default=os.getenv("ADVENTURE_LOG_LEVEL", "WARNING"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level))
    run_game(save_dir=args.save_dir, battery_life=args.battery_life)


if __name__ == "__main__":
    main()
