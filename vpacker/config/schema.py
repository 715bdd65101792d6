"""
Pydantic models for vpacker configuration with built-in validation.
"""
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional

from vpacker.archive.format import (
    DEFAULT_MAGIC,
    DEFAULT_MAX_PAYLOAD_BYTES,
    DEFAULT_VERSION,
    INT32_MAX,
    INT32_MIN,
    MAX_NAME_BYTES,
    MAX_PAYLOAD_LIMIT,
)

# --- Config Sections ---

class LoggingConfig(BaseModel):
    level: str = "INFO"
    file: Optional[str] = None
    debug_file: Optional[str] = None

    @field_validator("level")
    @classmethod
    def check_level(cls, v: str) -> str:
        if v.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown logging level '{v}'")
        return v.upper()

class ArchiveConfig(BaseModel):
    magic: str = DEFAULT_MAGIC.decode("ascii")
    version: int = DEFAULT_VERSION
    max_payload_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES
    root_name: Optional[str] = "data"

    @field_validator("magic")
    @classmethod
    def check_magic(cls, v: str) -> str:
        if len(v) != 4 or not v.isascii():
            raise ValueError(f"'archive.magic' must be exactly 4 ASCII characters, got '{v}'")
        return v

    @field_validator("version")
    @classmethod
    def check_version(cls, v: int) -> int:
        if not INT32_MIN <= v <= INT32_MAX:
            raise ValueError(f"'archive.version' does not fit a 32-bit integer: {v}")
        return v

    @field_validator("max_payload_bytes")
    @classmethod
    def check_max_payload(cls, v: int) -> int:
        if not 0 <= v <= MAX_PAYLOAD_LIMIT:
            raise ValueError(
                f"'archive.max_payload_bytes' must be between 0 and {MAX_PAYLOAD_LIMIT}, got {v}"
            )
        return v

    @field_validator("root_name")
    @classmethod
    def check_root_name(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        if len(v.encode("utf-8")) > MAX_NAME_BYTES or "/" in v or v == "..":
            raise ValueError(f"'archive.root_name' is not a usable directory name: '{v}'")
        return v

    @property
    def magic_bytes(self) -> bytes:
        return self.magic.encode("ascii")

class InputConfig(BaseModel):
    data_directory: str = "data"

class OutputConfig(BaseModel):
    directory: str = "."
    extension: str = "vp"

    @field_validator("extension")
    @classmethod
    def strip_dot(cls, v: str) -> str:
        v = v.lstrip(".")
        if not v:
            raise ValueError("'output.extension' must not be empty")
        return v

# --- Top-Level App Config ---

class AppConfig(BaseModel):
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    archive: ArchiveConfig = Field(default_factory=ArchiveConfig)
    input: InputConfig = Field(default_factory=InputConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @model_validator(mode='after')
    def check_data_directory(self) -> 'AppConfig':
        data_dir = self.input.data_directory
        if not data_dir or data_dir in (".", "..") or "/" in data_dir.strip("/"):
            raise ValueError(
                f"'input.data_directory' must name a single sub-directory of the input root, got '{data_dir}'"
            )
        return self
