"""
Settings resolved from the environment (and a local .env file, if present).

    TQL_LOG_LEVEL   logging level for the command line (default WARNING)
    TQL_COLOR       auto | always | never (default auto); NO_COLOR forces never
    TQL_ENCODING    encoding used to read and write files (default utf-8)
"""

from __future__ import annotations
import os
import sys
from typing import Literal
import dotenv
from pydantic import BaseModel, field_validator


ColorMode = Literal["auto", "always", "never"]


class Settings(BaseModel):
    log_level: str = "WARNING"
    color: ColorMode = "auto"
    encoding: str = "utf-8"

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @classmethod
    def from_env(cls, load_dotenv: bool = True) -> Settings:
        if load_dotenv:
            dotenv.load_dotenv()
        color = os.getenv("TQL_COLOR", "auto").lower()
        if os.getenv("NO_COLOR"):
            color = "never"
        return cls(
            log_level=os.getenv("TQL_LOG_LEVEL", "WARNING"),
            color=color,
            encoding=os.getenv("TQL_ENCODING", "utf-8"),
        )

    def color_enabled(self, stream=None) -> bool:
        """Whether diffs written to `stream` (stdout by default) should be coloured."""
        if self.color == "always":
            return True
        if self.color == "never":
            return False
        stream = stream or sys.stdout
        return hasattr(stream, "isatty") and stream.isatty()
