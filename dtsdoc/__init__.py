"""Flatten TypeDoc declaration trees into linked, page-oriented documentation."""

from .config import DtsDocConfig, TransformConfig, load_config
from .loader import load_project, load_project_file
from .orchestrator import BuildOutcome, Orchestrator
from .serialize import serialize_pages
from .transform import Transform, transform_project

__all__ = [
    "BuildOutcome",
    "DtsDocConfig",
    "Orchestrator",
    "Transform",
    "TransformConfig",
    "load_config",
    "load_project",
    "load_project_file",
    "serialize_pages",
    "transform_project",
]
