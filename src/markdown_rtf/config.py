from __future__ import annotations

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from markdown_rtf.settings import ParseErrorOutput, RtfSettings, load_settings

SETTINGS_PATH_ENV = "MARKDOWN_RTF_SETTINGS"
PARSE_ERRORS_ENV = "MARKDOWN_RTF_PARSE_ERRORS"


def load_environment() -> None:
    env_path = find_dotenv(usecwd=True)
    load_dotenv(env_path, override=False)


def _get_env_path(name: str) -> Path | None:
    value = os.getenv(name, "").strip()
    if not value:
        return None
    return Path(value)


def get_settings_path() -> Path | None:
    return _get_env_path(SETTINGS_PATH_ENV)


def get_parse_error_output(
    default: ParseErrorOutput | None = None,
) -> ParseErrorOutput | None:
    value = os.getenv(PARSE_ERRORS_ENV, "").strip().lower()
    if not value:
        return default
    try:
        return ParseErrorOutput(value)
    except ValueError as err:
        allowed = ", ".join(policy.value for policy in ParseErrorOutput)
        raise ValueError(f"{PARSE_ERRORS_ENV}={value!r} is not one of: {allowed}") from err


def resolve_settings(
    settings_path: str | None = None, parse_errors: str | None = None
) -> RtfSettings:
    """Settings file from the argument or MARKDOWN_RTF_SETTINGS, then the
    parse-error policy from the argument or MARKDOWN_RTF_PARSE_ERRORS."""
    path = Path(settings_path) if settings_path else get_settings_path()
    settings = load_settings(path) if path else RtfSettings()
    policy = ParseErrorOutput(parse_errors) if parse_errors else get_parse_error_output()
    if policy is not None:
        settings = settings.model_copy(update={"parse_error_output": policy})
    return settings
