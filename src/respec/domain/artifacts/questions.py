"""Render conflicts as A/B questions and map replies back to options."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal, TypeAlias

from respec.domain.errors import ResolutionOptionNotFoundError
from respec.domain.model import OPTION_A, OPTION_B

if TYPE_CHECKING:
    from respec.domain.model import Conflict, ResolutionOption

Choice: TypeAlias = Literal["a", "b"]

_CHOICE_WORDS: dict[str, Choice] = {
    "a": "a",
    "option a": "a",
    "first": "a",
    "first one": "a",
    "b": "b",
    "option b": "b",
    "second": "b",
    "second one": "b",
}


def _render_template(template: str, option_a: str, option_b: str) -> str:
    return template.replace("{option_a}", option_a).replace("{option_b}", option_b)


def build_conflict_question(conflict: Conflict) -> str:
    """Text shown to the user for ``conflict``.

    Exclusion conflicts carrying a question template use it as the question line;
    ``{option_a}`` and ``{option_b}`` placeholders are filled with option labels.
    """

    header = f"I detected a conflict: {conflict.description}"
    if len(conflict.resolution_options) < 2:  # noqa: PLR2004
        return f"{header}\n\nPlease choose an option to continue."

    option_a, option_b = conflict.resolution_options[:2]
    template = getattr(conflict, "question_template", None)
    question = (
        _render_template(template, option_a.description, option_b.description)
        if template
        else "Which would you prefer?"
    )
    return (
        f"{header}\n\n{question}\n"
        f"A) {option_a.description}\n   Outcome: {option_a.expected_outcome}\n\n"
        f"B) {option_b.description}\n   Outcome: {option_b.expected_outcome}\n\n"
        "Please respond with A or B."
    )


def parse_conflict_choice(message: str) -> Choice | None:
    """Map a direct reply (``"A"``, ``"option b"``, ``"first one"``) to a choice."""

    return _CHOICE_WORDS.get(message.strip().lower())


def option_for_choice(conflict: Conflict, choice: str) -> ResolutionOption:
    parsed = parse_conflict_choice(choice)
    if parsed is None:
        raise ValueError(f"Choice must be 'a' or 'b', got {choice!r}")
    option_id = OPTION_A if parsed == "a" else OPTION_B
    index = 0 if parsed == "a" else 1
    if len(conflict.resolution_options) <= index:
        raise ResolutionOptionNotFoundError(conflict.id, option_id)
    return conflict.resolution_options[index]
