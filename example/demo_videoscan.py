#!/usr/bin/env python3
"""
Custom workflow example: importing a VideoScan-style plate read.

VideoScan exports one fluorescence column per well, with curves of
different length (wells are read until they plateau) and the odd dropped
frame.  ``process_videoscan`` is an ordinary function taking the document
as its first argument; it uses only the public RDML API.

Run:
    python example/demo_videoscan.py
"""

import tempfile
from pathlib import Path

import numpy as np
import pandas as pd

from RDMLOrganizer import (
    RDML, Dye, Experiment, PcrFormat, Run, Sample, Target,
)


# ============================================================================
# The workflow
# ============================================================================

def process_videoscan(rdml, fluor, wells, target_id="gene", dye_id="SYBR",
                      experiment_id="VideoScan", run_id="run1"):
    """
    Add a VideoScan plate read to *rdml*.

    Parameters
    ----------
    rdml : RDML
        Document to fill (modified in place).
    fluor : pandas.DataFrame
        First column ``cyc``, then one column per well; NaN where a well
        has no reading.
    wells : dict
        ``{column name: (react id, sample id)}``.

    Returns
    -------
    pandas.DataFrame
        The descriptor table of the imported curves.
    """
    if rdml.get('dye', dye_id) is None:
        rdml.set('dye', Dye(id=dye_id, dye_chemistry="non-saturating DNA binding dye"))
    if rdml.get('target', target_id) is None:
        rdml.set('target', Target(id=target_id, dye_id=dye_id))
    for _, sample_id in wells.values():
        if rdml.get('sample', sample_id) is None:
            rdml.set('sample', Sample(id=sample_id, type="unkn"))

    experiment = rdml.get('experiment', experiment_id)
    if experiment is None:
        experiment = rdml.set('experiment', Experiment(id=experiment_id))
    if run_id not in experiment.run:
        experiment.run.add(Run(id=run_id, instrument="VideoScan",
                               pcr_format=PcrFormat(rows=8, columns=12,
                                                    row_label="ABC", column_label="123")))

    table = pd.DataFrame({
        'fdata.name': list(wells),
        'exp.id': experiment_id,
        'run.id': run_id,
        'react.id': [react_id for react_id, _ in wells.values()],
        'sample': [sample_id for _, sample_id in wells.values()],
        'target': target_id,
    })
    rdml.set_fdata(fluor, table)
    return rdml.as_table(name_pattern=lambda row: row.position)


def simulate_plate_read(lengths=(35, 45, 55), gap=(0, 37)):
    """Sigmoid curves of the given lengths, one dropped frame at *gap* (column, cycle)."""
    cycles = np.arange(1, max(lengths) + 1, dtype=float)
    fluor = pd.DataFrame({'cyc': cycles})
    for i, length in enumerate(lengths):
        curve = 0.05 + 1.0 / (1.0 + np.exp(-(cycles - 22.0 - 2 * i) / 1.5))
        curve[length:] = np.nan
        fluor[f"well{i + 1}"] = curve
    column, cycle = gap
    fluor.loc[fluor['cyc'] == cycle, f"well{column + 1}"] = np.nan
    return fluor


if __name__ == "__main__":
    print("=" * 70)
    print("  VIDEOSCAN IMPORT")
    print("=" * 70)

    # ------------------------------------------------------------------------
    print("\n1. Simulating a ragged plate read...")
    # well3 (55 cycles) loses its reading at cycle 37
    fluor = simulate_plate_read(gap=(2, 37))
    print(f"   Curves: {list(fluor.columns[1:])}, {len(fluor)} cycles")

    # ------------------------------------------------------------------------
    print("\n2. Importing into a new document...")
    rdml = RDML()
    wells = {'well1': (1, "S1"), 'well2': (2, "S2"), 'well3': (13, "S3")}
    table = process_videoscan(rdml, fluor, wells)
    print(table[['fdata.name', 'react.id', 'sample', 'target']].to_string(index=False))

    # ------------------------------------------------------------------------
    print("\n3. Saving and reading back...")
    with tempfile.TemporaryDirectory() as tmp:
        path = rdml.save(Path(tmp) / "videoscan.rdml")
        loaded = RDML.load(path)

    back = loaded.get_fdata(loaded.as_table(name_pattern=lambda row: row.position))
    print(f"   Matrix: {back.shape[0]} rows x {back.shape[1] - 1} curves")
    print(f"   Missing values per curve: {back.iloc[:, 1:].isna().sum().to_dict()}")
    print(f"   Round trip identical: {loaded == rdml}")
