#!/usr/bin/env python3
"""
Fluorescence extraction / injection.

Matrix layouts
--------------
wide  – first column ``cyc`` (adp) or ``tmp`` (mdp): sorted union of the x
        values of all curves; one column per ``fdata.name``, NaN where a
        curve has no point.
long  – columns ``cyc|tmp``, ``fluor``, ``fdata.name``; one row per point.

The descriptor table is the output of ``core.table.as_table`` (or any
DataFrame with the columns ``fdata.name, exp.id, run.id, react.id, target``
and optionally ``sample``).
"""

from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from RDMLOrganizer.core.defaults import DP_AXES
from RDMLOrganizer.core.errors import (
    DuplicateNameError,
    DuplicatePointError,
    UnknownColumnError,
)
from RDMLOrganizer.schema import Adp, Data, Experiment, Mdp, React, Run


def _axis(dp_type: str) -> str:
    try:
        return DP_AXES[dp_type]
    except KeyError:
        raise ValueError(f"dp_type must be one of {', '.join(DP_AXES)}, got {dp_type!r}") from None


def _records(table: pd.DataFrame) -> Dict[str, dict]:
    """``{fdata.name: row}``; names must be unique."""
    names = table['fdata.name']
    duplicated = names[names.duplicated()].unique().tolist()
    if duplicated:
        raise DuplicateNameError(
            f"fdata.name must be unique in the descriptor table: {duplicated}")
    return {row['fdata.name']: row for row in table.to_dict('records')}


def _present(value) -> bool:
    if value is None:
        return False
    return not (isinstance(value, float) and np.isnan(value))


def _find_data(rdml, row: dict) -> Optional[Data]:
    experiment = rdml.experiment.get(str(row['exp.id']))
    run = experiment.run.get(str(row['run.id'])) if experiment is not None else None
    react = run.react.get(int(row['react.id'])) if run is not None else None
    return react.data.get(str(row['target'])) if react is not None else None


def _curve(data: Data, dp_type: str) -> pd.Series:
    x_name = DP_AXES[dp_type]
    points = getattr(data, dp_type)
    return pd.Series([p.fluor for p in points],
                     index=pd.Index([getattr(p, x_name) for p in points], dtype=float, name=x_name),
                     dtype=float)


# ---------------------------------------------------------------------------
# extraction
# ---------------------------------------------------------------------------

def get_fdata(rdml, table: pd.DataFrame, dp_type: str = 'adp',
              long_table: bool = False) -> pd.DataFrame:
    """
    Extract the curves named in *table* as a wide or long DataFrame.

    Parameters
    ----------
    rdml : RDML
    table : pandas.DataFrame
        Descriptor rows, one per curve.
    dp_type : {'adp', 'mdp'}
        Amplification or melting curves.
    long_table : bool
        Long layout instead of wide.

    Raises
    ------
    DuplicateNameError
        ``fdata.name`` is not unique.
    DuplicatePointError
        A curve repeats an x value (wide layout only).
    KeyError
        A descriptor row points at a node that does not exist.
    """
    x_name = _axis(dp_type)
    curves: Dict[str, pd.Series] = {}
    for name, row in _records(table).items():
        data = _find_data(rdml, row)
        if data is None:
            raise KeyError(
                f"{name!r}: no data for experiment {row['exp.id']!r}, run {row['run.id']!r}, "
                f"react {row['react.id']!r}, target {row['target']!r}")
        curves[name] = _curve(data, dp_type)

    if long_table:
        frames = [pd.DataFrame({x_name: curve.index.to_numpy(),
                                'fluor': curve.to_numpy(),
                                'fdata.name': name})
                  for name, curve in curves.items()]
        if not frames:
            return pd.DataFrame(columns=[x_name, 'fluor', 'fdata.name'])
        return pd.concat(frames, ignore_index=True)

    if not curves:
        return pd.DataFrame(columns=[x_name])
    for name, curve in curves.items():
        if not curve.index.is_unique:
            repeated = curve.index[curve.index.duplicated()].unique().tolist()
            raise DuplicatePointError(name, repeated)
    wide = pd.concat(curves, axis=1, join='outer', sort=True).sort_index()
    wide.index.name = x_name
    wide = wide.reset_index()
    wide.columns = [x_name] + list(curves)
    return wide


# ---------------------------------------------------------------------------
# injection
# ---------------------------------------------------------------------------

def set_fdata(rdml, fdata: pd.DataFrame, table: pd.DataFrame, dp_type: str = 'adp'):
    """
    Write a wide fluorescence matrix back into the tree.

    For every value column the Experiment / Run / React / Data path named
    by its descriptor row is located, creating whatever is missing, and
    the curve is replaced by the column's non-NaN points.

    Parameters
    ----------
    rdml : RDML
    fdata : pandas.DataFrame
        Wide matrix; first column is the x axis.
    table : pandas.DataFrame
        Descriptor rows keyed by ``fdata.name``.
    dp_type : {'adp', 'mdp'}

    Raises
    ------
    UnknownColumnError
        Some value columns have no descriptor row (the tree is untouched).
    DuplicateNameError
        ``fdata.name`` is not unique.
    """
    _axis(dp_type)
    rows = _records(table)
    value_columns = list(fdata.columns[1:])
    unknown = [column for column in value_columns if column not in rows]
    if unknown:
        raise UnknownColumnError(unknown)

    # build every new node and point first, so a bad row leaves the tree untouched
    x = fdata.iloc[:, 0].to_numpy(dtype=float)
    updates: List[tuple] = []
    for column in value_columns:
        row = rows[column]
        values = fdata[column].to_numpy(dtype=float)
        keep = ~np.isnan(values)
        if dp_type == 'adp':
            # optional tmp of the existing points is not part of the matrix; keep it
            existing = _find_data(rdml, row)
            tmp = {p.cyc: p.tmp for p in existing.adp} if existing is not None else {}
            points = [Adp(cyc=c, tmp=tmp.get(c), fluor=f)
                      for c, f in zip(x[keep], values[keep])]
        else:
            points = [Mdp(tmp=t, fluor=f) for t, f in zip(x[keep], values[keep])]
        sample = row.get('sample')
        react = React(id=int(row['react.id']),
                      sample=str(sample) if _present(sample) else None)
        updates.append((str(row['exp.id']), str(row['run.id']), react,
                        Data(tar=str(row['target'])), points))

    for exp_id, run_id, new_react, new_data, points in updates:
        experiment = rdml.experiment.get(exp_id)
        if experiment is None:
            experiment = rdml.experiment.add(Experiment(id=exp_id))
        run = experiment.run.get(run_id)
        if run is None:
            run = experiment.run.add(Run(id=run_id))
        react = run.react.get(new_react.id)
        if react is None:
            react = run.react.add(new_react)
        data = react.data.get(new_data.key())
        if data is None:
            data = react.data.add(new_data)
        setattr(data, dp_type, points)
