"""Role documents: a named, ordered run_list of recipe references.

The run_list is declared here and read by the provisioning runtime; nothing in
this package resolves or executes recipes.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Any, List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from .exceptions import RoleError
from .paths import bundled_roles_dir

_ENTRY_RE = re.compile(r"^(?P<kind>recipe|role)\[(?P<name>[A-Za-z0-9_.\-]+)(?:::(?P<recipe>[A-Za-z0-9_.\-]+))?\]$")
DEFAULT_ROLE = "postgresql"


class RunListItem(BaseModel):
    kind: Literal["recipe", "role"]
    name: str
    recipe: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _parse_entry(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        match = _ENTRY_RE.match(value.strip())
        if match is None:
            raise ValueError(f"Malformed run_list entry: {value!r}")
        if match["kind"] == "role" and match["recipe"]:
            raise ValueError(f"Role entries cannot name a recipe: {value!r}")
        return match.groupdict()

    @property
    def cookbook(self) -> Optional[str]:
        return self.name if self.kind == "recipe" else None

    def __str__(self) -> str:
        suffix = f"::{self.recipe}" if self.recipe else ""
        return f"{self.kind}[{self.name}{suffix}]"


class Role(BaseModel):
    name: str
    description: str = Field(default="")
    run_list: List[RunListItem] = Field(default_factory=list)

    def cookbooks(self) -> List[str]:
        """Cookbook names referenced by the run_list, first occurrence order."""
        seen: List[str] = []
        for item in self.run_list:
            if item.cookbook and item.cookbook not in seen:
                seen.append(item.cookbook)
        return seen

    def entries(self) -> List[str]:
        return [str(item) for item in self.run_list]


def load_role(path: Optional[Path] = None) -> Role:
    """Load a role document, the bundled ``postgresql`` role by default."""
    source = path or bundled_roles_dir() / f"{DEFAULT_ROLE}.yaml"
    try:
        with source.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        return Role.model_validate(data)
    except (yaml.YAMLError, ValidationError) as exc:
        raise RoleError(f"Invalid role document {source}: {exc}") from exc


__all__ = ["DEFAULT_ROLE", "Role", "RunListItem", "load_role"]
