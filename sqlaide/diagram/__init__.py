"""Diagram renderers for table definitions."""
from sqlaide.diagram.plantuml import PlantUmlDiagram, PlantUmlIeOptions, plantuml_ie_notation

__all__ = ["PlantUmlDiagram", "PlantUmlIeOptions", "plantuml_ie_notation"]
