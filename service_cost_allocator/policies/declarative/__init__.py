from .loader import load_definitions
from .model import DeclarativePolicy
from .schema import PolicyDefinition

__all__ = ["load_definitions", "DeclarativePolicy", "PolicyDefinition"]
