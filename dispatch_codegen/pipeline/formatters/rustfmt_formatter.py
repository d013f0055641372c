"""
rustfmt formatter for Rust code.
"""

from __future__ import annotations

import logging
import subprocess

from ..config import FormatterConfig
from .base import Formatter

logger = logging.getLogger(__name__)


class RustfmtFormatter(Formatter):
    """Formatter using rustfmt for Rust code."""

    def __init__(self, executable: str = "rustfmt"):
        self.executable = executable
        self._available = None

    def is_available(self) -> bool:
        """Check if rustfmt is installed."""
        if self._available is None:
            try:
                result = subprocess.run(
                    [self.executable, "--version"],
                    capture_output=True,
                    text=True,
                    timeout=5,
                )
                self._available = result.returncode == 0
            except (subprocess.SubprocessError, FileNotFoundError):
                self._available = False
        return self._available

    def format(self, code: str, config: FormatterConfig) -> str:
        """
        Format Rust code using rustfmt.

        Args:
            code: Rust source code to format
            config: Formatter configuration

        Returns:
            Formatted code, or the input unchanged if rustfmt is missing or fails
        """
        if not self.is_available():
            logger.warning("%s is not available, leaving generated code unformatted", self.executable)
            return code

        cmd = [self.executable, "--emit", "stdout", "--edition", config.edition]
        if config.max_width:
            cmd.extend(["--config", f"max_width={config.max_width}"])

        try:
            # rustfmt reads stdin when no file is given
            result = subprocess.run(
                cmd,
                input=code,
                capture_output=True,
                text=True,
                timeout=30,
            )
        except subprocess.SubprocessError as e:
            logger.warning("%s failed: %s", self.executable, e)
            return code

        if result.returncode != 0:
            logger.warning("%s exited with status %d: %s", self.executable, result.returncode, result.stderr.strip())
            return code
        return result.stdout
