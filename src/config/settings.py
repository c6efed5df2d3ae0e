"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use SCENEDOWN_ prefix (e.g., SCENEDOWN_STRICT_MODE=true).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use SCENEDOWN_ prefix.

    Examples:
        SCENEDOWN_INDENT_UNIT="  "
        SCENEDOWN_STRICT_MODE=true
        SCENEDOWN_NARRATOR_TERMINATORS="。！？"
    """

    model_config = SettingsConfigDict(
        env_prefix="SCENEDOWN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Output configuration
    indent_unit: str = Field(
        default="    ",
        description="Literal prefix repeated once per indentation level in the output",
    )

    output_suffix: str = Field(
        default=".rpy",
        description="File extension used by the CLI when no output file is given",
    )

    # Diagnostics configuration
    narrator_terminators: str = Field(
        default="。",
        description="Characters accepted as the final mark of narrator text",
    )

    strict_mode: bool = Field(
        default=False,
        description="Strict mode: treat warnings as errors",
    )

    # I/O configuration
    encoding: str = Field(
        default="utf-8",
        description="Text encoding for source files and included files",
    )

    def indent_make(self, level: int) -> str:
        """
        Build the indentation prefix for a given level.

        Args:
            level: Number of indentation units (negative values count as 0)

        Returns:
            indent_unit repeated level times

        Example:
            >>> settings = AppSettings()
            >>> settings.indent_make(2)
            '        '
        """
        return self.indent_unit * max(0, level)

    def narrator_isTerminated(self, message: str) -> bool:
        """
        Check whether narrator text ends with an accepted terminator.

        Example:
            >>> settings = AppSettings()
            >>> settings.narrator_isTerminated('こんにちは。')
            True
        """
        return bool(message) and message[-1] in self.narrator_terminators


# Singleton instance - import this in your code
appsettings = AppSettings()
