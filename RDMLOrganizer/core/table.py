#!/usr/bin/env python3
"""
Tabular projection of the reaction data.

One row per (experiment, run, react, target) that carries a curve or a
computed value, in insertion order at every level.  The ``fdata.name``
column is the handle ``core.fdata`` uses to find tree nodes again, so it
should be unique across the table.

Example
-------
>>> tab = rdml.as_table(
...     name_pattern=lambda row: f"{row.run.id}_{row.position}_{row.data.tar.id}",
...     row_filter=lambda row: row.sample is not None and row.sample.type == "unkn",
...     cq=lambda row: row.data.cq,
... )
"""

import warnings
from dataclasses import dataclass
from typing import Callable, List, Optional

import pandas as pd

from RDMLOrganizer.core.defaults import TABLE_COLUMNS
from RDMLOrganizer.core.errors import RDMLWarning
from RDMLOrganizer.schema import Data, Experiment, React, Run, Sample, Target


@dataclass
class RowContext:
    """Entities in scope for one table row (sample/target None when unresolved)."""
    experiment: Experiment
    run: Run
    react: React
    data: Data
    sample: Optional[Sample]
    target: Optional[Target]

    @property
    def position(self) -> str:
        return self.run.position(self.react.id)

    @property
    def sample_id(self) -> Optional[str]:
        return self.react.sample.id if self.react.sample is not None else None


def default_name(row: RowContext) -> str:
    """``position_sample_sampletype_target``, e.g. ``A01_S1_unkn_GAPDH``."""
    sample_type = row.sample.type if row.sample is not None else ""
    return "_".join([row.position, row.sample_id or "", sample_type, row.data.tar.id])


def as_table(rdml, name_pattern: Optional[Callable[[RowContext], str]] = None,
             row_filter: Optional[Callable[[RowContext], bool]] = None,
             **columns: Callable[[RowContext], object]) -> pd.DataFrame:
    """
    Flatten the reaction data of *rdml* into a DataFrame.

    Parameters
    ----------
    rdml : RDML
    name_pattern : callable, optional
        ``f(row) -> str`` for the ``fdata.name`` column (default
        ``default_name``).
    row_filter : callable, optional
        ``f(row) -> bool``; rows where it is False are left out.
    **columns : callable
        Extra computed columns, ``name=f(row)``, appended after the
        descriptive ones (e.g. ``cq=lambda row: row.data.cq``).

    Returns
    -------
    pandas.DataFrame
        Columns ``TABLE_COLUMNS`` followed by the extra columns.
    """
    name_pattern = name_pattern or default_name
    records: List[dict] = []

    for experiment in rdml.experiment.values():
        for run in experiment.run.values():
            for react in run.react.values():
                sample = react.sample.resolve(rdml) if react.sample is not None else None
                for data in react.data.values():
                    if not (data.adp or data.mdp or data.has_values()):
                        continue
                    row = RowContext(experiment, run, react, data, sample,
                                     data.tar.resolve(rdml))
                    if row_filter is not None and not row_filter(row):
                        continue
                    record = {
                        'fdata.name':   name_pattern(row),
                        'exp.id':       experiment.id,
                        'run.id':       run.id,
                        'react.id':     react.id,
                        'position':     row.position,
                        'sample':       row.sample_id,
                        'sample.type':  sample.type if sample is not None else None,
                        'target':       data.tar.id,
                        'target.dyeId': row.target.dye_id.id if row.target is not None else None,
                        'adp':          bool(data.adp),
                        'mdp':          bool(data.mdp),
                    }
                    for name, func in columns.items():
                        record[name] = func(row)
                    records.append(record)

    extra = [name for name in columns if name not in TABLE_COLUMNS]
    table = pd.DataFrame.from_records(records, columns=TABLE_COLUMNS + extra)

    names = table['fdata.name']
    duplicated = names[names.duplicated()].unique().tolist()
    if duplicated:
        warnings.warn(
            f"fdata.name is not unique ({', '.join(map(str, duplicated))}); "
            "fluorescence injection will refuse this table. Pass a name_pattern.",
            RDMLWarning,
        )
    return table
