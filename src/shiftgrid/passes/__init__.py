from .base import CoveragePass, PassSpec
from .demand import DemandPass
from .direct import DirectCoveragePass
from .registry import default_pass_specs, direct_only_pass_specs, normalize_pass_specs
from .support import HalfSupportPass
from .surplus import SurplusPoolPass

__all__ = [
    "CoveragePass",
    "PassSpec",
    "DemandPass",
    "DirectCoveragePass",
    "HalfSupportPass",
    "SurplusPoolPass",
    "default_pass_specs",
    "direct_only_pass_specs",
    "normalize_pass_specs",
]
