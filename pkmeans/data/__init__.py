from .instance import ProblemInstance, load_instance, parse_instance
from .validation import validate_instance

__all__ = ["ProblemInstance", "load_instance", "parse_instance", "validate_instance"]
