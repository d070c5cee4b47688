from .aggregation import (
    aggregate,
    filter_by_window,
    select_authoritative_subset,
    compute_level,
    compute_average_wait_minutes,
    last_updated_at,
    report_weight,
    estimate_wait_minutes,
    resolve_timestamp,
    current_millis
)
from .formatting import format_age, format_date
