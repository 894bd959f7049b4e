"""
FILE: jot/repl/completer.py
PURPOSE: Autocomplete logic for REPL commands and arguments
EXPORTS:
  - JotCompleter (Completer for command/arg completion)
  - create_completer() -> JotCompleter
DEPENDENCIES:
  - prompt_toolkit.completion (Completer, Completion)
  - jot.core.service (for dynamic space names and task ids)
NOTES:
  - Suggests command names when at start of line
  - Suggests subcommands after "space", "list" and "list item"
  - Suggests sort keys after "sort" and after --sort
  - Suggests priorities after --priority
  - Suggests space names after "use" (plus all/deleted) and "assign <ids>"
  - Suggests task IDs for commands expecting them
  - Case-insensitive matching
"""

import logging
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from ..core.constants import VALID_PRIORITIES, VALID_SORT_KEYS
from ..core.exceptions import JotError


logger = logging.getLogger(__name__)


class JotCompleter(Completer):
    """
    Custom completer for the jot REPL.

    Provides context-aware autocomplete:
    - Command names at start of input
    - Subcommands for grouped commands
    - Flag names and flag values
    - Space names and task ids from the database
    """

    COMMANDS = [
        "add", "ls", "show", "expand", "bulk", "done", "undone", "edit",
        "rm", "restore", "purge", "assign", "sort", "use", "space", "list",
        "help", "clear", "exit", "quit",
    ]

    SPACE_SUBCOMMANDS = ["add", "ls", "rm"]
    LIST_SUBCOMMANDS = ["add", "ls", "show", "rm", "rename", "item"]
    ITEM_SUBCOMMANDS = ["add", "done", "undone", "edit", "rm"]

    SCOPE_WORDS = ["all", "deleted"]

    COMMAND_FLAGS = {
        "add": ["--priority", "--due", "--space"],
        "ls": ["--sort"],
        "edit": ["--priority", "--due", "--cancel"],
        "list": ["--sort", "--priority", "--due"],
    }

    FLAG_VALUES = {
        "--sort": list(VALID_SORT_KEYS),
        "--priority": list(VALID_PRIORITIES),
    }

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        """
        Generate completions based on current input.

        Logic:
            1. Start of input -> commands
            2. Value position of a known flag -> flag values
            3. Grouped commands -> subcommands
            4. sort / use / assign -> sort keys, scopes, space names
            5. Commands taking ids -> task ids
            6. Otherwise -> flags for the command
        """
        text_before_cursor = document.text_before_cursor
        words = text_before_cursor.split()
        at_new_word = text_before_cursor.endswith(" ")

        # Case 1: Empty input or typing the first word -> suggest commands
        if not words or (not at_new_word and len(words) == 1):
            word = words[0] if words else ""
            yield from self._complete_words(word, self.COMMANDS, self._get_command_description)
            return

        command = words[0].lower()
        current = "" if at_new_word else words[-1]
        # Words before the one being typed
        done_words = words if at_new_word else words[:-1]
        position = len(done_words)

        # Case 2: Flag values
        if done_words and done_words[-1].lower() in self.FLAG_VALUES:
            yield from self._complete_words(current, self.FLAG_VALUES[done_words[-1].lower()])
            return

        # Case 3: Subcommands
        if command == "space" and position == 1:
            yield from self._complete_words(current, self.SPACE_SUBCOMMANDS)
            return
        if command == "list" and position == 1:
            yield from self._complete_words(current, self.LIST_SUBCOMMANDS)
            return
        if command == "list" and position == 2 and done_words[1].lower() == "item":
            yield from self._complete_words(current, self.ITEM_SUBCOMMANDS)
            return
        if command == "list" and position == 2 and done_words[1].lower() in ("add", "ls"):
            yield from self._complete_task_ids(current)
            return

        # Case 4: Sort keys, scopes and space names
        if command == "sort" and position == 1:
            yield from self._complete_words(current, VALID_SORT_KEYS)
            return
        if command == "use" and position == 1:
            yield from self._complete_words(current, self.SCOPE_WORDS)
            yield from self._complete_space_names(current)
            return
        if command == "space" and position == 2 and done_words[1].lower() == "rm":
            yield from self._complete_space_names(current)
            return
        if command == "assign" and position == 2:
            yield from self._complete_words(current, ["none"])
            yield from self._complete_space_names(current)
            return

        # Case 5: Task ids
        id_first_cmds = {"show", "expand", "done", "undone", "edit", "rm", "restore", "assign"}
        if command in id_first_cmds and position == 1:
            yield from self._complete_task_ids(current, deleted=command == "restore")
            return

        # Case 6: Flags
        if current.startswith("--") or at_new_word:
            yield from self._complete_words(current, self.COMMAND_FLAGS.get(command, []))

    def _complete_words(self, word: str, options, describe=None) -> Iterable[Completion]:
        """
        Complete from a fixed list of options.

        Args:
            word: Partial word being typed
            options: Candidate words
            describe: Optional callable giving display_meta for an option
        """
        word_lower = word.lower()
        for option in options:
            if option.startswith(word_lower):
                yield Completion(
                    option,
                    start_position=-len(word),
                    display=option,
                    display_meta=describe(option) if describe else "",
                )

    def _complete_space_names(self, word: str) -> Iterable[Completion]:
        """
        Complete space names for use/assign/space rm.

        Notes:
            - Automatically quotes space names with spaces
            - Handles partial matches even when user is typing inside quotes
        """
        # Import here to avoid circular dependency
        from ..core import service

        word_stripped = word.strip('"').strip("'")
        word_lower = word_stripped.lower()

        try:
            spaces = service.list_spaces()
        except JotError as e:
            logger.debug("Space completion unavailable: %s", e)
            return

        for space in spaces:
            if space.name.lower().startswith(word_lower):
                # Quote space names that contain spaces
                text = f'"{space.name}"' if " " in space.name else space.name
                yield Completion(
                    text,
                    start_position=-len(word),
                    display=text,
                    display_meta=f"Space #{space.id}",
                )

    def _complete_task_ids(self, word: str, deleted: bool = False) -> Iterable[Completion]:
        """
        Complete task IDs with their text as a label.

        Args:
            word: Partial id being typed
            deleted: Offer recently deleted tasks instead of active ones
        """
        from ..core import service
        from ..core.constants import SCOPE_ALL, SCOPE_DELETED

        try:
            tasks = service.list_tasks(SCOPE_DELETED if deleted else SCOPE_ALL)
        except JotError as e:
            logger.debug("Task id completion unavailable: %s", e)
            tasks = []

        for t in tasks[:200]:  # cap for responsiveness
            id_str = str(t.id)
            if id_str.startswith(word):
                text = (t.text or "").strip()
                meta = text if len(text) <= 40 else text[:37] + "..."
                yield Completion(
                    id_str,
                    start_position=-len(word),
                    display=id_str,
                    display_meta=meta,
                )

    @staticmethod
    def _get_command_description(command: str) -> str:
        """Get description for a command (shown in autocomplete menu)."""
        descriptions = {
            "add": "Create a new task",
            "ls": "Show the current view",
            "show": "Full task details",
            "expand": "Expand / collapse a task",
            "bulk": "Toggle bulk edit",
            "done": "Mark task as complete",
            "undone": "Reopen a task",
            "edit": "Edit a task",
            "rm": "Delete task (restorable)",
            "restore": "Restore a deleted task",
            "purge": "Remove old deleted tasks",
            "assign": "File task under a space",
            "sort": "Change ordering",
            "use": "Switch scope",
            "space": "Manage spaces",
            "list": "Manage checklists",
            "help": "Show available commands",
            "clear": "Clear the screen",
            "exit": "Exit REPL",
            "quit": "Exit REPL",
        }
        return descriptions.get(command, "")


def create_completer() -> JotCompleter:
    """
    Create and return a JotCompleter instance.

    Usage:
        completer = create_completer()
        session = PromptSession(completer=completer)
    """
    return JotCompleter()
