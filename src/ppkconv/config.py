"""Converter configuration.

Values come from the environment (optionally seeded from a local .env file).
`load_config()` re-reads the environment on every call so tests can
monkeypatch variables without reloading the module.
"""
from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

load_dotenv()

DEFAULT_FILE_ENCODING = "utf-8"
DEFAULT_PASSPHRASE_ENCODING = "utf-8"
DEFAULT_OUTPUT_MODE = 0o600
DEFAULT_LOG_LEVEL = "INFO"


class ConverterConfig(BaseModel):
    # .ppk files have no declared encoding; the structural part is ASCII
    file_encoding: str = DEFAULT_FILE_ENCODING
    passphrase_encoding: str = DEFAULT_PASSPHRASE_ENCODING
    output_mode: int = DEFAULT_OUTPUT_MODE
    log_level: str = DEFAULT_LOG_LEVEL

    @field_validator("output_mode", mode="before")
    @classmethod
    def _parse_octal(cls, v):
        if isinstance(v, str):
            return int(v, 8)
        return v

    @field_validator("log_level")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper()


def load_config() -> ConverterConfig:
    return ConverterConfig(
        file_encoding=os.getenv("PPKCONV_FILE_ENCODING", DEFAULT_FILE_ENCODING),
        passphrase_encoding=os.getenv("PPKCONV_PASSPHRASE_ENCODING", DEFAULT_PASSPHRASE_ENCODING),
        output_mode=os.getenv("PPKCONV_OUTPUT_MODE", oct(DEFAULT_OUTPUT_MODE)[2:]),
        log_level=os.getenv("PPKCONV_LOG_LEVEL", DEFAULT_LOG_LEVEL),
    )
