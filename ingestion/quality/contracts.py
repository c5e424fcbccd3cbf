"""Data contracts for the daily indicator record.

We use the [Pandera](https://pandera.readthedocs.io/) library to define
the schema of the record written to ``latest.json``.  The schema acts
both as documentation and as runtime validation: the collector
validates the record before writing, so a record that breaks an
invariant aborts the run instead of being published.

See ``ingestion/transform/record.py`` for how the record is built.
"""

import numpy as np
from pandera.pandas import Column, DataFrameSchema, Check

from ingestion.transform.record import DailyIndicatorRecord


def _finite(series):
    return np.isfinite(series.astype("float64"))


def _is_text(series):
    return series.map(lambda v: isinstance(v, str))


# Text columns carry no dtype so that both object and pandas "str"
# columns pass; the element check enforces the type instead.
DailyIndicatorSchema = DataFrameSchema(
    {
        "date": Column(
            nullable=False,
            checks=[Check(_is_text), Check.str_matches(r"^\d{4}-\d{2}-\d{2}$")],
        ),
        "siberianHighIdx": Column(
            float,
            nullable=False,
            checks=[Check(_finite), Check.in_range(-2.0, 2.0)],
        ),
        "aoIndex": Column(float, nullable=False, checks=Check(_finite)),
        "japanSeaSstAnom": Column(float, nullable=False, checks=Check(_finite)),
        "ensoPhase": Column(int, nullable=False, checks=Check.isin([-1, 0, 1])),
        "notes": Column(nullable=False, checks=Check(_is_text)),
    },
    strict=True,
    ordered=True,
    name="DailyIndicatorRecord",
)


def validate_record(record: DailyIndicatorRecord) -> DailyIndicatorRecord:
    """Validate ``record`` against :data:`DailyIndicatorSchema`.

    Raises
    ------
    pandera.errors.SchemaError
        If any invariant of the record is violated.
    pandera.errors.SchemaErrors
        If several structural checks fail together (for
        example an extra column that also breaks the column order).
    """
    DailyIndicatorSchema.validate(record.to_frame())
    return record


__all__ = ["DailyIndicatorSchema", "validate_record"]
