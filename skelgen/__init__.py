"""skelgen -- materialise parameterised project skeletons from template trees."""

__version__ = "0.1.0"
