"""Package addressing models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


class PackageRef(BaseModel):
    """A package, optionally narrowed to one multibuild flavor.

    The serialized form is ``base_name`` for the parent package and
    ``base_name:flavor`` for exactly one sub-result.
    """

    model_config = ConfigDict(frozen=True)

    project: str
    base_name: str
    flavor: str | None = None

    @field_validator("flavor")
    @classmethod
    def _empty_flavor_is_none(cls, value: str | None) -> str | None:
        return value or None

    @property
    def is_multibuild(self) -> bool:
        return self.flavor is not None

    def __str__(self) -> str:
        if self.flavor is None:
            return self.base_name
        return f"{self.base_name}:{self.flavor}"
