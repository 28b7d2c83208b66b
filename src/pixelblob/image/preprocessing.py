"""
Buffer preprocessing operations with pipeline architecture.

Each operation is a separate strategy class. A pipeline is an ordered list of
steps, each naming an operation plus its parameters, so the same operation may
appear several times (the gradient pipeline repeats the vector-sum pass).

Reference gradient pipeline:
1. Grayscale conversion
2. Finite-difference gradient
3. Vector-sum refinement (N passes)
4. Grey collapse
5. Threshold at 10
6. Black border of 5 pixels

Usage:
    pipeline = PreprocessingPipeline([{"step": "gaussian_blur", "radius": 2}])
    processed_buffer, applied_ops = pipeline.process(buffer)
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import yaml
from pydantic import ValidationError

from pixelblob.algorithms.convolution import gaussian_blur
from pixelblob.algorithms.gradient import (
    finite_difference_gradient,
    grey_collapse,
    vector_sum_refinement,
)
from pixelblob.algorithms.morphology import dilate, erode
from pixelblob.common.enums import PipelineStep
from pixelblob.config import GradientConfig
from pixelblob.core.buffer import PixelBuffer
from pixelblob.exceptions import ConfigurationError
from pixelblob.schemas.params import PipelineStepParams

from .transform import crop_border, grayscale, threshold

logger = logging.getLogger(__name__)

StepSpec = Union[PipelineStepParams, Dict[str, Any]]


class PreprocessOperation(ABC):
    """Abstract base class for preprocessing operations."""

    @abstractmethod
    def apply(self, buffer: PixelBuffer, params: PipelineStepParams) -> PixelBuffer:
        """
        Apply operation to buffer.

        Args:
            buffer: Input buffer (may be modified in place)
            params: Step parameters

        Returns:
            Processed buffer
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Operation name for logging and tracking."""
        pass


class GrayscaleOperation(PreprocessOperation):
    """Average B, G and R into a gray level."""

    def apply(self, buffer: PixelBuffer, params: PipelineStepParams) -> PixelBuffer:
        return grayscale(buffer)

    @property
    def name(self) -> str:
        return PipelineStep.GRAYSCALE.value


class GaussianBlurOperation(PreprocessOperation):
    """Separable triangular-squared blur."""

    def apply(self, buffer: PixelBuffer, params: PipelineStepParams) -> PixelBuffer:
        return gaussian_blur(buffer, params.radius)

    @property
    def name(self) -> str:
        return PipelineStep.GAUSSIAN_BLUR.value


class FiniteDifferenceOperation(PreprocessOperation):
    """Initial gradient estimate."""

    def apply(self, buffer: PixelBuffer, params: PipelineStepParams) -> PixelBuffer:
        return finite_difference_gradient(buffer)

    @property
    def name(self) -> str:
        return PipelineStep.FINITE_DIFFERENCE.value


class VectorSumOperation(PreprocessOperation):
    """Direction-coherence refinement of a gradient buffer."""

    def apply(self, buffer: PixelBuffer, params: PipelineStepParams) -> PixelBuffer:
        return vector_sum_refinement(buffer, params.iterations)

    @property
    def name(self) -> str:
        return PipelineStep.VECTOR_SUM.value


class GreyCollapseOperation(PreprocessOperation):
    """Spread gradient magnitude over all channels."""

    def apply(self, buffer: PixelBuffer, params: PipelineStepParams) -> PixelBuffer:
        return grey_collapse(buffer)

    @property
    def name(self) -> str:
        return PipelineStep.GREY_COLLAPSE.value


class ThresholdOperation(PreprocessOperation):
    """Binarize on the blue channel."""

    def apply(self, buffer: PixelBuffer, params: PipelineStepParams) -> PixelBuffer:
        return threshold(buffer, params.value, params.invert)

    @property
    def name(self) -> str:
        return PipelineStep.THRESHOLD.value


class CropBorderOperation(PreprocessOperation):
    """Paint a frame around the image."""

    def apply(self, buffer: PixelBuffer, params: PipelineStepParams) -> PixelBuffer:
        return crop_border(buffer, params.thickness, params.white)

    @property
    def name(self) -> str:
        return PipelineStep.CROP_BORDER.value


class ErodeOperation(PreprocessOperation):
    """One-pixel cross erosion."""

    def apply(self, buffer: PixelBuffer, params: PipelineStepParams) -> PixelBuffer:
        return erode(buffer)

    @property
    def name(self) -> str:
        return PipelineStep.ERODE.value


class DilateOperation(PreprocessOperation):
    """One-pixel cross dilation."""

    def apply(self, buffer: PixelBuffer, params: PipelineStepParams) -> PixelBuffer:
        return dilate(buffer)

    @property
    def name(self) -> str:
        return PipelineStep.DILATE.value


OPERATIONS: Dict[PipelineStep, PreprocessOperation] = {
    PipelineStep.GRAYSCALE: GrayscaleOperation(),
    PipelineStep.GAUSSIAN_BLUR: GaussianBlurOperation(),
    PipelineStep.FINITE_DIFFERENCE: FiniteDifferenceOperation(),
    PipelineStep.VECTOR_SUM: VectorSumOperation(),
    PipelineStep.GREY_COLLAPSE: GreyCollapseOperation(),
    PipelineStep.THRESHOLD: ThresholdOperation(),
    PipelineStep.CROP_BORDER: CropBorderOperation(),
    PipelineStep.ERODE: ErodeOperation(),
    PipelineStep.DILATE: DilateOperation(),
}


def parse_step(spec: StepSpec) -> PipelineStepParams:
    """
    Validate one step definition.

    Raises:
        ConfigurationError: If the step name or a parameter is invalid
    """
    if isinstance(spec, PipelineStepParams):
        return spec
    try:
        return PipelineStepParams(**spec)
    except (ValidationError, TypeError) as e:
        step_name = spec.get("step", "<missing>") if isinstance(spec, dict) else repr(spec)
        raise ConfigurationError(f"pipeline step '{step_name}'", str(e))


class PreprocessingPipeline:
    """
    Pipeline for applying preprocessing operations in sequence.

    Steps run in the order given. Operations that produce a new buffer
    (erode, dilate) replace the working buffer; the others modify it in place.
    """

    def __init__(self, steps: Sequence[StepSpec] = ()):
        """
        Initialize pipeline.

        Args:
            steps: Step definitions as PipelineStepParams or plain dicts

        Raises:
            ConfigurationError: If any step is invalid
        """
        self.steps: List[PipelineStepParams] = [parse_step(step) for step in steps]

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "PreprocessingPipeline":
        """
        Load a pipeline from a YAML file holding a list of step mappings
        (or a mapping with a ``steps`` key).
        """
        with open(path, "r") as f:
            data = yaml.safe_load(f) or []
        if isinstance(data, dict):
            data = data.get("steps", [])
        if not isinstance(data, list):
            raise ConfigurationError(str(path), "expected a list of pipeline steps")
        return cls(data)

    def to_list(self) -> List[Dict[str, Any]]:
        """Step definitions as plain dictionaries."""
        return [step.to_dict() for step in self.steps]

    def process(self, buffer: PixelBuffer, copy: bool = True) -> Tuple[PixelBuffer, List[str]]:
        """
        Apply every step to the buffer.

        Args:
            buffer: Input buffer
            copy: Work on a clone so the input stays untouched

        Returns:
            Tuple of (processed_buffer, list_of_applied_operation_names)
        """
        result = buffer.clone() if copy else buffer
        applied: List[str] = []

        for step in self.steps:
            op = OPERATIONS[step.step]
            try:
                result = op.apply(result, step)
                applied.append(op.name)
                logger.debug(f"Applied preprocessing: {op.name}")
            except Exception as e:
                logger.error(f"Failed to apply {op.name}: {e}")
                raise

        if not applied:
            logger.debug("No preprocessing operations applied")

        return result, applied

    @staticmethod
    def get_available_operations() -> List[str]:
        """Get list of available operation names."""
        return [op.name for op in OPERATIONS.values()]


def gradient_pipeline(config: Optional[GradientConfig] = None) -> PreprocessingPipeline:
    """
    Build the reference gradient pipeline.

    grayscale -> finite difference -> N x vector sum -> grey collapse ->
    threshold -> black border, with N, the threshold and the border width
    taken from ``config``.
    """
    config = config or GradientConfig()
    steps: List[StepSpec] = [
        {"step": PipelineStep.GRAYSCALE},
        {"step": PipelineStep.FINITE_DIFFERENCE},
    ]
    if config.refinement_iterations > 0:
        steps.append({"step": PipelineStep.VECTOR_SUM, "iterations": config.refinement_iterations})
    steps += [
        {"step": PipelineStep.GREY_COLLAPSE},
        {"step": PipelineStep.THRESHOLD, "value": config.threshold},
        {"step": PipelineStep.CROP_BORDER, "thickness": config.border_thickness},
    ]
    return PreprocessingPipeline(steps)
