from enum import Enum

from questionbank.core.errors import ValidationError


class Difficulty(str, Enum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    SENIOR = "SENIOR"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


def parse_difficulty(value: str | None) -> Difficulty:
    """Normalize a raw path, query or body value into a ``Difficulty``."""
    if value is None:
        raise ValidationError("Difficulty level cannot be null")
    try:
        return Difficulty(value.strip().upper())
    except ValueError as exc:
        valid = ", ".join(member.value for member in Difficulty)
        raise ValidationError(
            f"Invalid difficulty level: {value}. Valid values are: {valid}"
        ) from exc
