"""
Bridge configuration schema.

A BridgeConfig holds one mapping table for export and two for import:

    BridgeConfig(
        output={"color": "rgb(color)", "coordinates": "[int(points.x), int(points.y)][]"},
        input={
            "elements": {"hex(scenery.color)": "color"},
            "layers": {"visual_coordinates.layer_id": "id"},
        },
    )

Output values are mapping strings or callables invoked as
fn(element, element, elements). Input values are destination dot-paths or a
CustomFieldMapping carrying its own transform.
"""
from typing import Any, Callable, Dict, Union

from pydantic import BaseModel, ConfigDict, Field

OutputTransform = Callable[..., Any]


class CustomFieldMapping(BaseModel):
    """Destination path plus a transform applied to the resolved source value."""
    model_config = ConfigDict(frozen=True)

    key: str = Field(..., min_length=1)
    transform: Callable[[Any], Any]


FieldMapping = Dict[str, Union[str, OutputTransform]]
ReverseFieldMapping = Dict[str, Union[str, CustomFieldMapping]]


class BridgeInputConfig(BaseModel):
    """Import mapping tables, applied independently to every source record."""
    model_config = ConfigDict(extra='forbid')

    elements: ReverseFieldMapping = Field(default_factory=dict)
    layers: ReverseFieldMapping = Field(default_factory=dict)


class BridgeConfig(BaseModel):
    """Schema for a drawing bridge configuration."""
    model_config = ConfigDict(extra='forbid')

    output: FieldMapping = Field(default_factory=dict)
    input: BridgeInputConfig = Field(default_factory=BridgeInputConfig)

    def to_mapping(self) -> Dict[str, Any]:
        """
        Plain-dict view used for merging.

        CustomFieldMapping entries stay model instances so a merge treats them
        as atomic values.
        """
        return {
            "output": dict(self.output),
            "input": {
                "elements": dict(self.input.elements),
                "layers": dict(self.input.layers),
            },
        }
