"""Renderer agnostic chart descriptors."""

from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class ChartDataset(BaseModel):
    """One data series."""
    label: Optional[str] = None
    data: List[float]
    border_color: Optional[str] = None
    background_color: Optional[Union[str, List[str]]] = None
    border_width: Optional[int] = None
    tension: Optional[float] = None
    fill: Optional[bool] = None

    class Config:
        """Pydantic config."""
        alias_generator = to_camel
        populate_by_name = True


class ChartData(BaseModel):
    """Labels and series."""
    labels: List[str]
    datasets: List[ChartDataset]


class ChartConfig(BaseModel):
    """A complete chart descriptor."""
    type: str
    data: ChartData
    options: Dict[str, Any] = Field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with camelCase keys, omitting unset styling."""
        return self.model_dump(by_alias=True, exclude_none=True)
