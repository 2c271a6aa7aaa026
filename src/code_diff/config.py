"""Configuration management for the code diff tool."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Patching
    stub_opcode: int = Field(
        default=0x4E800020,
        description="Instruction word written at a symbol's entry when stubbing it (PowerPC blr)"
    )

    # Symbol resolution
    unknown_symbol_label: str = Field(
        default=" --- ",
        description="Display name for addresses that fall outside every known symbol"
    )

    # Session behavior
    pause_during_update: bool = Field(
        default=True,
        description="Pause a running engine while evidence is applied, then resume it"
    )
    show_status: bool = Field(
        default=False,
        description="Print status lines on recording state transitions"
    )

    # Display
    max_display_rows: int = Field(
        default=500,
        description="Maximum number of candidate rows printed by the CLI"
    )

    @field_validator("stub_opcode", mode="before")
    @classmethod
    def _parse_opcode(cls, value):
        """Accept hex strings such as 0x4E800020 from the environment."""
        if isinstance(value, str):
            return int(value, 0)
        return value

    @field_validator("unknown_symbol_label")
    @classmethod
    def _label_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("unknown_symbol_label must be non-empty")
        return value


# Global settings instance
settings = Settings()
