"""Foldwall Generators: scenario CSV sampling and batch simulation."""

from .scenario_generator import ScenarioGenerator
from .sequence_generator import SequenceGenerator

__all__ = ["ScenarioGenerator", "SequenceGenerator"]
