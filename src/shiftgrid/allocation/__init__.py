from .checks import contract_violations, rest_interval_violations
from .gap_fill import Gap, fill_gaps, find_gaps, same_day_shortage
from .holidays import allocate_rest_days, partition_staff

__all__ = [
    "Gap",
    "allocate_rest_days",
    "contract_violations",
    "fill_gaps",
    "find_gaps",
    "partition_staff",
    "rest_interval_violations",
    "same_day_shortage",
]
