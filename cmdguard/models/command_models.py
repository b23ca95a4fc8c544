from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class ComponentType(str, Enum):
    COMMAND = "command"
    SUBCOMMAND = "subcommand"
    FLAG = "flag"
    ARGUMENT = "argument"
    PATH = "path"
    PIPE = "pipe"
    REDIRECTION = "redirection"
    OTHER = "other"


class CommandComponent(BaseModel):
    part: str = Field(..., description="The literal token of the command")
    description: str = Field(..., description="Explanation of what this part does")
    type: ComponentType = Field(
        default=ComponentType.OTHER, description="Categorized type for the component"
    )
