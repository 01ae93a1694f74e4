from .base import AllocationPolicy, BasePolicy, normalize_unknown_service_policy
from .builtin import AdvancedPolicy, SimplifiedPolicy
from .declarative import DeclarativePolicy, PolicyDefinition, load_definitions
from .registry import PolicyRegistry, build_default_registry

__all__ = [
    "AllocationPolicy",
    "AdvancedPolicy",
    "BasePolicy",
    "DeclarativePolicy",
    "PolicyDefinition",
    "PolicyRegistry",
    "SimplifiedPolicy",
    "build_default_registry",
    "load_definitions",
    "normalize_unknown_service_policy",
]
