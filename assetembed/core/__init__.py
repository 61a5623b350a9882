"""assetembed Core - Shared constants, errors and validators.

Import specific names from submodules:
    from assetembed.core.constants import ListPolicy
    from assetembed.core.errors import EmptyResultError
    from assetembed.core.validators import validate_config
"""

# Re-export main module references for convenience
from assetembed.core import constants, errors, validators

__all__ = [
    "constants",
    "errors",
    "validators",
]
