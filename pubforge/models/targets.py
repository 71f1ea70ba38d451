"""Publish target specifications: a name or a ready-made instance.

A spec is a tagged union discriminated on ``kind``. The resolver matches on
the tag; only ``as_target_spec`` looks at raw values, at the API boundary.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pubforge.models.config import PublisherEntry


class NamedTarget(BaseModel):
    """A target that must be loaded by name and instantiated."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["name"] = "name"
    name: str
    config: dict[str, Any] = Field(default_factory=dict)
    platforms: list[str] | None = None


class InstanceTarget(BaseModel):
    """A target that was already constructed by the caller."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal["instance"] = "instance"
    target: Any

    @field_validator("target")
    @classmethod
    def _check_capability(cls, value: Any) -> Any:
        if not callable(getattr(value, "publish", None)):
            raise ValueError(
                f"{type(value).__name__} does not provide a publish() method"
            )
        return value


TargetSpec = Annotated[Union[NamedTarget, InstanceTarget], Field(discriminator="kind")]


def as_target_spec(value: Any) -> TargetSpec:
    """Wrap a user-supplied target value in its tagged spec.

    Examples
    --------
    >>> as_target_spec("noop").kind
    'name'
    """
    if isinstance(value, (NamedTarget, InstanceTarget)):
        return value
    if isinstance(value, str):
        return NamedTarget(name=value)
    if isinstance(value, PublisherEntry):
        return NamedTarget(
            name=value.name, config=dict(value.config), platforms=value.platforms
        )
    if callable(getattr(value, "publish", None)):
        return InstanceTarget(target=value)
    raise TypeError(
        f"Cannot use {type(value).__name__!r} as a publish target: expected a "
        "target name or an object with a publish() method"
    )
