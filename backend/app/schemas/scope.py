from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SharedScope(BaseModel):
    """A (program, year) cohort whose schedule comes from the institutional feed."""

    model_config = ConfigDict(frozen=True)

    program: str = Field(min_length=1, max_length=100)
    year: str = Field(min_length=1, max_length=20)

    @field_validator("program", "year", mode="before")
    @classmethod
    def normalize_identity(cls, value: object) -> str:
        return str(value).strip()

    @property
    def key(self) -> str:
        return f"shared:{self.program}|{self.year}"


class PersonalScope(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner_id: str = Field(min_length=1, max_length=36)

    @field_validator("owner_id", mode="before")
    @classmethod
    def normalize_owner(cls, value: object) -> str:
        return str(value).strip()

    @property
    def key(self) -> str:
        return f"personal:{self.owner_id}"


Scope = Union[SharedScope, PersonalScope]
