from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import DiceLimits


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DICE_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Bounds that keep evaluation cheap and reject garbage input.
    max_count: int = Field(default=100, ge=1)
    max_sides: int = Field(default=1000, ge=2)
    max_modifier: int = Field(default=9999, ge=0)

    # "double" rolls twice the dice on a critical; "max_face" rolls the base
    # group once and grants its maximum face for the second set.
    critical_policy: Literal["double", "max_face"] = "double"

    # Refuse advantage/disadvantage/critical when the base die is a d20.
    enforce_roll_type_eligibility: bool = True

    history_size: int = Field(default=50, ge=1)
    log_level: str = "INFO"

    @property
    def limits(self) -> DiceLimits:
        return DiceLimits(
            max_count=self.max_count,
            max_sides=self.max_sides,
            max_modifier=self.max_modifier,
        )


settings = Settings()
