"""Pydantic models for the rgm repository index."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_serializer, model_validator


class StatusKind(str, Enum):
    BARE = "Bare"
    CLEAN = "Clean"
    DIRTY = "Dirty"
    DIVERGED = "Diverged"
    DETACHED = "Detached"
    OTHER = "Other"


class Status(BaseModel):
    """Synchronization state of a working copy.

    Serialized as a tagged variant: ``"Clean"`` for payload-free kinds and
    ``{"Diverged": [ahead, behind]}`` for divergence, where ``ahead`` counts
    commits only on the local branch and ``behind`` commits only on
    ``origin/<branch>``.
    """

    model_config = ConfigDict(frozen=True)

    kind: StatusKind
    ahead: int = Field(default=0, ge=0)
    behind: int = Field(default=0, ge=0)

    @classmethod
    def diverged(cls, ahead: int, behind: int) -> Status:
        return cls(kind=StatusKind.DIVERGED, ahead=ahead, behind=behind)

    @model_validator(mode="before")
    @classmethod
    def _from_tagged(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"kind": data}
        if isinstance(data, dict) and set(data) == {StatusKind.DIVERGED.value}:
            counts = data[StatusKind.DIVERGED.value]
            if not isinstance(counts, (list, tuple)) or len(counts) != 2:
                raise ValueError("Diverged status expects [ahead, behind]")
            ahead, behind = counts
            return {"kind": StatusKind.DIVERGED, "ahead": ahead, "behind": behind}
        return data

    @model_serializer
    def _to_tagged(self) -> str | dict[str, list[int]]:
        if self.kind is StatusKind.DIVERGED:
            return {self.kind.value: [self.ahead, self.behind]}
        return self.kind.value

    @property
    def label(self) -> str:
        if self.kind is StatusKind.DIVERGED:
            return f"Diverged +{self.ahead} -{self.behind}"
        return self.kind.value


UNKNOWN_STATUS = Status(kind=StatusKind.OTHER)


class Repo(BaseModel):
    """A working copy tracked by the index."""

    path: Path
    branch: str
    status: Status | None = None
    remotes: list[str] = Field(default_factory=list)
    alias: str | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, tags: list[str]) -> list[str]:
        return list(dict.fromkeys(tags))

    @computed_field
    @property
    def name(self) -> str:
        return self.path.name

    @property
    def display_status(self) -> Status:
        """Status to show; an unqueried status renders as Other."""
        return self.status or UNKNOWN_STATUS

    def add_tags(self, tags: Iterable[str]) -> bool:
        """Append tags not already present. Returns True if any tag was added."""
        added = False
        for tag in tags:
            if tag and tag not in self.tags:
                self.tags.append(tag)
                added = True
        return added

    def add_alias(self, alias: str) -> None:
        self.alias = alias

    def matches(self, query: str) -> bool:
        return query in self.name


class Meta(BaseModel):
    size: int = Field(ge=0)


class IndexDocument(BaseModel):
    """On-disk shape of the cache file."""

    repos: list[Repo]
    meta: Meta
