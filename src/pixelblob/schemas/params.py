"""
Preprocessing step definitions.

A pipeline can be described as a list of plain dictionaries (for example
loaded from YAML), each naming a step and the parameters it uses:

    - step: gaussian_blur
      radius: 2
    - step: threshold
      value: 10
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from pixelblob.common.constants import ConvolutionConstants, GradientConstants
from pixelblob.common.enums import PipelineStep


class PipelineStepParams(BaseModel):
    """One entry of a preprocessing pipeline."""

    model_config = ConfigDict(extra="forbid")

    step: PipelineStep
    radius: int = Field(
        ConvolutionConstants.DEFAULT_RADIUS,
        ge=ConvolutionConstants.MIN_RADIUS,
        le=ConvolutionConstants.MAX_RADIUS,
        description="Blur radius (gaussian_blur)",
    )
    iterations: int = Field(1, ge=1, description="Repetitions (vector_sum)")
    value: int = Field(
        GradientConstants.DEFAULT_THRESHOLD, ge=0, le=256, description="Cutoff (threshold)"
    )
    invert: bool = Field(False, description="Swap object/background values (threshold)")
    thickness: int = Field(
        GradientConstants.DEFAULT_BORDER_THICKNESS, ge=0, description="Border width (crop_border)"
    )
    white: bool = Field(False, description="Paint the border white instead of black (crop_border)")

    def to_dict(self) -> Dict[str, Any]:
        """Export parameters with the step as its string value."""
        data = self.model_dump(exclude_none=True)
        data["step"] = self.step.value
        return data
