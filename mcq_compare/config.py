"""
Runtime settings, read from the environment (and a .env file if present).

Command-line flags take precedence over everything here.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import find_dotenv, load_dotenv

from mcq_compare.errors import ConfigError
from mcq_compare.instruction_extractor import DEFAULT_TERMINATORS, DEFAULT_VARIABLE

DEFAULT_TYPE_IDS = [str(i) for i in range(1, 11)]
DEFAULT_RECORD_TEMPLATE = "news_mcq3_with_gemma3_type{type}_sample50.jsonl"
DEFAULT_INSTRUCTION_TEMPLATE = "append_news_mcq3_with_gemma3_type{type}.py"


def parse_type_ids(value: str | None) -> list[str]:
    """Parse '1,7,9' or '1-10' (or a mix) into type id strings.

    Raises:
        ValueError: On anything that is not a number or a range.
    """
    if not value:
        return []
    type_ids: list[str] = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        if "-" in part:
            start, end = (int(p) for p in part.split("-", 1))
            if end < start:
                raise ValueError(f"Empty type range '{part}'")
            type_ids.extend(str(i) for i in range(start, end + 1))
        else:
            type_ids.append(str(int(part)))
    return list(dict.fromkeys(type_ids))


@dataclass
class Settings:
    data_dir: str = os.path.join("public", "data")
    type_ids: list[str] = field(default_factory=lambda: list(DEFAULT_TYPE_IDS))
    record_template: str = DEFAULT_RECORD_TEMPLATE
    instruction_dir: str = os.path.join("..", "jiji-compe2")
    instruction_template: str = DEFAULT_INSTRUCTION_TEMPLATE
    instruction_variable: str = DEFAULT_VARIABLE
    instruction_output: str = os.path.join("src", "data", "mcq3SystemInstructions.json")
    terminators: str = DEFAULT_TERMINATORS
    page_size: int = 10
    log_level: str = "INFO"


def _env_type_ids(default: list[str]) -> list[str]:
    try:
        return parse_type_ids(os.getenv("MCQ_TYPE_IDS")) or default
    except ValueError as e:
        raise ConfigError(f"MCQ_TYPE_IDS: {e}") from e


def _env_page_size(default: int) -> int:
    value = os.getenv("MCQ_PAGE_SIZE")
    if not value:
        return default
    try:
        page_size = int(value)
    except ValueError:
        page_size = 0
    if page_size < 1:
        raise ConfigError(f"MCQ_PAGE_SIZE must be a positive integer, got '{value}'")
    return page_size


def load_settings() -> Settings:
    """Build Settings from MCQ_* environment variables and the nearest .env file.

    Raises:
        ConfigError: If MCQ_TYPE_IDS or MCQ_PAGE_SIZE cannot be parsed.
    """
    load_dotenv(find_dotenv(usecwd=True))
    defaults = Settings()
    return Settings(
        data_dir=os.getenv("MCQ_DATA_DIR", defaults.data_dir),
        type_ids=_env_type_ids(defaults.type_ids),
        record_template=os.getenv("MCQ_RECORD_TEMPLATE", defaults.record_template),
        instruction_dir=os.getenv("MCQ_INSTRUCTION_DIR", defaults.instruction_dir),
        instruction_template=os.getenv("MCQ_INSTRUCTION_TEMPLATE", defaults.instruction_template),
        instruction_variable=os.getenv("MCQ_INSTRUCTION_VARIABLE", defaults.instruction_variable),
        instruction_output=os.getenv("MCQ_INSTRUCTION_OUTPUT", defaults.instruction_output),
        terminators=os.getenv("MCQ_TERMINATORS") or defaults.terminators,
        page_size=_env_page_size(defaults.page_size),
        log_level=os.getenv("LOG_LEVEL", defaults.log_level).upper(),
    )
