"""Navigation utilities for UI components.

Every selection resolves to one of three tagged outcomes: ``Selected(value)``,
``Back`` or ``Cancelled``. Back and exit choices are bound to private marker objects,
so no legitimate value can ever be mistaken for a navigation request.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union

import questionary
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.key_binding.key_processor import KeyPress, KeyPressEvent
from prompt_toolkit.keys import Keys

from .errors import UserCancelled

PAGINATION_THRESHOLD = 30

T = TypeVar("T")


@dataclass(frozen=True)
class Selected(Generic[T]):
    value: T


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class Cancelled:
    # Set when the user chose to exit after a step failed
    failed: bool = False


NavResult = Union[Selected[T], Back, Cancelled]


class _Marker:
    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"<{self.name}>"


_BACK = _Marker("back")
_EXIT = _Marker("exit")
_NEXT_PAGE = _Marker("next-page")
_PREVIOUS_PAGE = _Marker("previous-page")


class Recovery(Enum):
    RETRY = "retry"
    BACK = "back"
    EXIT = "exit"


def to_nav_result(answer: Any) -> NavResult[Any]:
    """Convert a raw questionary answer into a tagged result. ``None`` means the prompt was aborted."""
    if answer is None or answer is _EXIT:
        return Cancelled()
    if answer is _BACK:
        return Back()
    return Selected(answer)


def get_questionary_style() -> questionary.Style:
    """Consistent questionary styling across all prompts."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan"),
            ("selected", "fg:green"),
        ]
    )


def add_navigation_choices_with_shortcuts(choices: list[dict[str, Any]], back_text: str | None) -> list:
    """Wrap choices and append back ('b', only when back_text is given) and exit ('q')."""
    nav_choices = [questionary.Choice(choice["name"], choice["value"]) for choice in choices]

    if back_text:
        nav_choices.append(questionary.Choice(f"⬅️ {back_text} (b)", _BACK, shortcut_key="b"))

    nav_choices.append(questionary.Choice("❌ Exit (q)", _EXIT, shortcut_key="q"))

    return nav_choices


def _bind_escape_to_back(question: questionary.Question) -> None:
    """Make ESC behave like pressing 'b' + Enter."""
    if not hasattr(question, "application"):
        return

    custom_bindings = KeyBindings()

    @custom_bindings.add(Keys.Escape, eager=True)
    def _(event: KeyPressEvent) -> None:
        event.app.key_processor.feed(KeyPress("b", ""))
        event.app.key_processor.feed(KeyPress(Keys.ControlM, ""))

    if hasattr(question.application, "key_bindings") and question.application.key_bindings:
        merged_bindings = KeyBindings()
        for binding in question.application.key_bindings.bindings:
            merged_bindings.bindings.append(binding)
        for binding in custom_bindings.bindings:
            merged_bindings.bindings.append(binding)
        question.application.key_bindings = merged_bindings


def select_with_navigation(prompt: str, choices: list[dict[str, Any]], back_text: str | None) -> NavResult[Any]:
    """Standard selection with back/exit navigation and ESC key support."""
    nav_choices = add_navigation_choices_with_shortcuts(choices, back_text)

    question = questionary.select(prompt, choices=nav_choices, style=get_questionary_style(), use_shortcuts=True)
    if back_text:
        _bind_escape_to_back(question)

    return to_nav_result(question.ask())


def select_with_pagination(
    prompt: str, choices: list[dict[str, Any]], back_text: str | None, page_size: int = 25
) -> NavResult[Any]:
    """Selection with pagination for large lists."""
    total_items = len(choices)
    total_pages = (total_items + page_size - 1) // page_size
    current_page = 0

    while True:
        start_idx = current_page * page_size
        end_idx = min(start_idx + page_size, total_items)

        page_prompt = f"{prompt} (Page {current_page + 1} of {total_pages})"
        paginated_choices = [questionary.Choice(choice["name"], choice["value"]) for choice in choices[start_idx:end_idx]]

        if current_page < total_pages - 1:
            paginated_choices.append(
                questionary.Choice(f"→ Next Page ({end_idx + 1}-{min(end_idx + page_size, total_items)})", _NEXT_PAGE)
            )

        if current_page > 0:
            paginated_choices.append(
                questionary.Choice(f"← Previous Page ({start_idx - page_size + 1}-{start_idx})", _PREVIOUS_PAGE)
            )

        if back_text:
            paginated_choices.append(questionary.Choice(f"⬅️ {back_text}", _BACK))

        paginated_choices.append(questionary.Choice("❌ Exit", _EXIT))

        selected = questionary.select(
            page_prompt, choices=paginated_choices, style=get_questionary_style(), use_shortcuts=False
        ).ask()

        if selected is _NEXT_PAGE:
            current_page += 1
        elif selected is _PREVIOUS_PAGE:
            current_page -= 1
        else:
            return to_nav_result(selected)


def select_with_auto_pagination(
    prompt: str, choices: list[dict[str, Any]], back_text: str | None, threshold: int = PAGINATION_THRESHOLD
) -> NavResult[Any]:
    """Select with automatic pagination based on choice count.

    Uses keyboard shortcuts for small lists (≤threshold), pagination for large lists (>threshold).
    """
    select_fn = select_with_pagination if len(choices) > threshold else select_with_navigation
    return select_fn(prompt, choices, back_text)


def confirm(message: str, default: bool = False) -> bool:
    """Yes/no prompt. Raises UserCancelled when the prompt is aborted."""
    answer = questionary.confirm(message, default=default, style=get_questionary_style()).ask()
    if answer is None:
        raise UserCancelled()
    return bool(answer)


def select_recovery(allow_retry: bool = True, back_text: str | None = "Go back") -> Recovery:
    """Ask how to continue after a failed step. Aborting the prompt counts as exit."""
    choices = []
    if allow_retry:
        choices.append(questionary.Choice("🔄 Retry", Recovery.RETRY, shortcut_key="r"))
    if back_text:
        choices.append(questionary.Choice(f"⬅️ {back_text}", Recovery.BACK, shortcut_key="b"))
    choices.append(questionary.Choice("❌ Exit", Recovery.EXIT, shortcut_key="q"))

    answer = questionary.select(
        "What would you like to do?", choices=choices, style=get_questionary_style(), use_shortcuts=True
    ).ask()
    return answer or Recovery.EXIT
