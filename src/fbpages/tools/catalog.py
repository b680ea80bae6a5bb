"""Tool catalog -- lookup, listing, and argument validation.

Each registered descriptor gets a pydantic model generated from its
input schema. Validation is structural only: required fields and
primitive types. Semantic limits (timestamp windows, metric names)
are left to the Graph API.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    create_model,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from fbpages.tools.base import ToolDescriptor

_PRIMITIVES: dict[str, Any] = {
    "string": StrictStr,
    "number": StrictInt | StrictFloat,
    "integer": StrictInt,
    "boolean": StrictBool,
}


class _Arguments(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


def _model_name(tool_name: str) -> str:
    return "".join(part.capitalize() for part in tool_name.split("_")) + "Arguments"


def build_arguments_model(descriptor: ToolDescriptor) -> type[BaseModel]:
    """Generate the argument model for a tool from its JSON schema.

    Properties whose name starts with ``_`` only document the tool and
    are not part of the model.
    """
    required = set(descriptor.required)
    fields: dict[str, Any] = {}
    for name, prop in descriptor.properties.items():
        if name.startswith("_"):
            continue
        json_type = prop.get("type", "string")
        if json_type not in _PRIMITIVES:
            msg = f"Unsupported type {json_type!r} for {descriptor.name}.{name}"
            raise ValueError(msg)
        annotation = _PRIMITIVES[json_type]
        if name in required:
            fields[name] = (annotation, ...)
        else:
            fields[name] = (annotation | None, None)
    return create_model(_model_name(descriptor.name), __base__=_Arguments, **fields)


class ToolCatalog:
    """Registry of the tools a server advertises.

    Supports registration, lookup by name, listing in declaration
    order, and structural validation of call arguments.
    """

    def __init__(self, descriptors: Iterable[ToolDescriptor] = ()) -> None:
        self._tools: dict[str, ToolDescriptor] = {}
        self._models: dict[str, type[BaseModel]] = {}
        for descriptor in descriptors:
            self.register(descriptor)

    def register(self, descriptor: ToolDescriptor) -> None:
        """Register a tool.

        Raises:
            ValueError: If a tool with the same name is already registered.
        """
        if descriptor.name in self._tools:
            msg = f"Tool already registered: {descriptor.name}"
            raise ValueError(msg)
        self._models[descriptor.name] = build_arguments_model(descriptor)
        self._tools[descriptor.name] = descriptor

    def get(self, name: str) -> ToolDescriptor:
        """Get a tool by name.

        Raises:
            KeyError: If the tool is not found.
        """
        if name not in self._tools:
            msg = f"Tool not found: {name}"
            raise KeyError(msg)
        return self._tools[name]

    def list_tools(self) -> list[ToolDescriptor]:
        """Return every descriptor in declaration order."""
        return list(self._tools.values())

    def validate(self, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        """Validate arguments for a tool and return the supplied fields.

        Raises:
            KeyError: If the tool is not found.
            pydantic.ValidationError: If a required field is missing or a
                value has the wrong primitive type.
        """
        self.get(name)
        model = self._models[name].model_validate(arguments)
        return model.model_dump(exclude_none=True)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def list_names(self) -> list[str]:
        """Return names of all registered tools."""
        return list(self._tools.keys())


def default_catalog() -> ToolCatalog:
    """Catalog holding every Facebook Pages tool."""
    from fbpages.tools.definitions import TOOLS

    return ToolCatalog(TOOLS)
