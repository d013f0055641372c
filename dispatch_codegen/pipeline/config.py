"""
Configuration for the dispatch code generator pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when the output file already exists.
    """

    ERROR_IF_EXISTS = "error"  # Default: raise error if file exists
    FORCE = "force"  # Overwrite


class ErrorMode(str, Enum):
    """What `expand` does with a rejected input."""

    RAISE = "raise"  # Propagate the DispatchError
    COMPILE_ERROR = "compile_error"  # Emit the item followed by compile_error!(...)


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        mode: How to handle existing output files
        validate_before_write: Whether to parse the output before writing it
        atomic_write: Whether to use atomic file writes
    """

    mode: OutputMode = OutputMode.ERROR_IF_EXISTS
    validate_before_write: bool = True
    atomic_write: bool = True


@dataclass
class FormatterConfig:
    """Configuration for the rustfmt post-processing step."""

    # Whether formatting is enabled
    enabled: bool = False

    # Rust edition passed to rustfmt
    edition: str = "2021"

    # rustfmt max_width
    max_width: int = 100


@dataclass
class DispatchConfig:
    """Configuration options for dispatch generation."""

    # Attribute that marks enums in `expand` mode, e.g. #[clap_dispatch(fn run(self))]
    attribute_name: str = "clap_dispatch"

    # Name the payload is bound to in every match arm
    payload_binding: str = "args"

    # Visibility of the generated trait ("", "pub", "pub(crate)", ...)
    trait_visibility: str = ""

    # Behavior on rejected input
    on_error: ErrorMode = ErrorMode.RAISE

    # Add a comment naming the generator above the generated code
    add_generation_comment: bool = False

    # Formatter configuration
    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    # Output configuration
    output: OutputConfig = field(default_factory=OutputConfig)

    @staticmethod
    def from_dict(d: dict) -> DispatchConfig:
        """Create a config from a dictionary."""
        config = DispatchConfig()
        for k, v in d.items():
            if k == "formatter" and isinstance(v, dict):
                config.formatter = FormatterConfig(**v)
            elif k == "output" and isinstance(v, dict):
                mode = v.get("mode", OutputMode.ERROR_IF_EXISTS)
                if isinstance(mode, str):
                    mode = OutputMode(mode)
                config.output = OutputConfig(
                    mode=mode,
                    validate_before_write=v.get("validate_before_write", True),
                    atomic_write=v.get("atomic_write", True),
                )
            elif k == "on_error":
                config.on_error = ErrorMode(v)
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "attribute_name": self.attribute_name,
            "payload_binding": self.payload_binding,
            "trait_visibility": self.trait_visibility,
            "on_error": self.on_error.value,
            "add_generation_comment": self.add_generation_comment,
            "formatter": {
                "enabled": self.formatter.enabled,
                "edition": self.formatter.edition,
                "max_width": self.formatter.max_width,
            },
            "output": {
                "mode": self.output.mode.value,
                "validate_before_write": self.output.validate_before_write,
                "atomic_write": self.output.atomic_write,
            },
        }
