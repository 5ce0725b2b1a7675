"""Command-line editing of Maven pom.xml files."""

from .add_command import add_dependencies
from .coordinates import parse_dependency
from .pom_models import Dependency, Parent, PomModel, Scope
from .pom_parser import parse_pom

__all__ = ["add_dependencies", "parse_dependency", "parse_pom", "Dependency", "Parent", "PomModel", "Scope"]
