"""
Split prompt instructions into sentences and separate what every prompt type
shares from what makes each type different.

Each MCQ prompt type lives in its own generation script that defines a
SYSTEM_INSTRUCTIONS string. The text is split on sentence terminators, the
sentences present verbatim in every type form the common instructions, and
the rest of each type's sentences are its type-specific instructions.
"""

from __future__ import annotations

import ast
import logging
import re
from functools import lru_cache
from typing import Mapping, Sequence

from mcq_compare.errors import MalformedRecordError, NoExtractableTextError
from mcq_compare.models import InstructionSet, InstructionSummary

logger = logging.getLogger(__name__)

# Japanese full stop, fullwidth full stop, fullwidth exclamation and question marks
DEFAULT_TERMINATORS = "。．！？"
DEFAULT_VARIABLE = "SYSTEM_INSTRUCTIONS"


@lru_cache(maxsize=32)
def _boundary_pattern(terminators: str) -> re.Pattern[str]:
    if not terminators:
        raise ValueError("At least one sentence terminator is required")
    chars = "".join(re.escape(c) for c in dict.fromkeys(terminators))
    return re.compile(f"(?<=[{chars}])")


def split_sentences(text: str, terminators: str = DEFAULT_TERMINATORS) -> list[str]:
    """Split text right after every terminator character.

    Args:
        text: Instruction text.
        terminators: Characters that end a sentence.

    Returns:
        Stripped, non-empty sentences in original order. Trailing text without
        a terminator is kept as a last sentence.

    Examples:
        >>> split_sentences("Do X. Do Y.", ".")
        ['Do X.', 'Do Y.']
    """
    parts = _boundary_pattern(terminators).split(text)
    return [part.strip() for part in parts if part.strip()]


def read_system_instructions(source_text: str, variable: str = DEFAULT_VARIABLE) -> str:
    """Evaluate the module-level string assigned to variable in Python source.

    Adjacent string literals inside parentheses are concatenated by the parser,
    which is how the generation scripts wrap long prompts.

    Raises:
        MalformedRecordError: If the source does not parse, the assignment is
                              missing, or its value is not a string literal.
    """
    try:
        tree = ast.parse(source_text)
    except SyntaxError as e:
        raise MalformedRecordError(
            f"source is not valid Python: {e.msg} (line {e.lineno})"
        ) from e

    value_node = None
    for node in tree.body:
        if isinstance(node, ast.Assign):
            targets = node.targets
        elif isinstance(node, ast.AnnAssign) and node.value is not None:
            targets = [node.target]
        else:
            continue
        if any(isinstance(t, ast.Name) and t.id == variable for t in targets):
            value_node = node.value

    if value_node is None:
        raise MalformedRecordError(f"{variable} block was not found.")

    try:
        value = ast.literal_eval(value_node)
    except (ValueError, TypeError, RecursionError) as e:
        raise MalformedRecordError(f"{variable} is not a literal value: {e}") from e

    if not isinstance(value, str):
        raise MalformedRecordError(
            f"{variable} must be a string (got {type(value).__name__})"
        )
    return value


def common_sentences(sentence_lists: Sequence[Sequence[str]]) -> list[str]:
    """Sentences present, by exact equality, in every list.

    The result follows the first list's order and holds each sentence once.
    """
    if not sentence_lists:
        return []

    first = list(dict.fromkeys(sentence_lists[0]))
    shared = set(first)
    for sentences in sentence_lists[1:]:
        shared.intersection_update(sentences)
    return [sentence for sentence in first if sentence in shared]


def extract_instructions(
    sources: Mapping[str, tuple[str, str]],
    terminators: str = DEFAULT_TERMINATORS,
) -> InstructionSummary:
    """Build the common/type-specific breakdown of instruction texts.

    Args:
        sources: type_id -> (source_reference, instruction_text), in the order
                 types should appear in the output.
        terminators: Sentence terminator characters.

    Returns:
        The instruction summary for every type with at least one sentence.

    Raises:
        NoExtractableTextError: If no type yields any sentence.

    Examples:
        >>> summary = extract_instructions(
        ...     {"1": ("a.py", "Do X. Do Y."), "2": ("b.py", "Do X. Do Z.")}, ".")
        >>> summary.common, summary.types["2"].specific
        (['Do X.'], ['Do Z.'])
    """
    sets: dict[str, InstructionSet] = {}
    for type_id, (source, text) in sources.items():
        sentences = split_sentences(text, terminators)
        if not sentences:
            logger.warning("No instruction sentences for type %s (%s); excluding it", type_id, source)
            continue
        sets[type_id] = InstructionSet(type_id=type_id, source=source, text=text, sentences=sentences)

    if not sets:
        raise NoExtractableTextError("No SYSTEM_INSTRUCTIONS could be extracted.")

    common = common_sentences([item.sentences for item in sets.values()])
    shared = set(common)
    for item in sets.values():
        item.specific = [sentence for sentence in item.sentences if sentence not in shared]

    logger.info("Found %d common sentences across %d types", len(common), len(sets))
    return InstructionSummary(common=common, types=sets)


def prompt_summary(instruction_set: InstructionSet | None) -> list[str]:
    """Sentences that best describe a type: its specific ones, else all of them."""
    if instruction_set is None:
        return []
    if instruction_set.specific:
        return list(instruction_set.specific)
    return list(instruction_set.sentences)
