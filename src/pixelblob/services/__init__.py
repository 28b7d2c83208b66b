"""
Services - orchestration on top of the pixel algorithms.
"""

from .analysis_service import AnalysisService
from .window_scanner import WindowScanner, merge_significant_intersections

__all__ = ["AnalysisService", "WindowScanner", "merge_significant_intersections"]
