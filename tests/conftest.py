"""Shared document fixtures."""

import numpy as np
import pytest

from RDMLOrganizer import (
    RDML, Adp, BgFluor, Condition, Data, DataCollectionSoftware, Dilution,
    DilutionPoint, Documentation, Dye, Experiment, Experimenter, Loop, Mdp,
    Oligo, PcrFormat, Quantity, RdmlId, React, Run, Sample, Sequences, Step,
    Target, Temperature, ThermalCyclingConditions,
)


def sigmoid(n_cycles, shift=0.0):
    cycles = np.arange(1, n_cycles + 1, dtype=float)
    return cycles, 0.05 + 1.0 / (1.0 + np.exp(-(cycles - 20.0 - shift) / 1.5))


def amplification(n_cycles, shift=0.0):
    cycles, fluor = sigmoid(n_cycles, shift)
    return [Adp(cyc=c, fluor=f) for c, f in zip(cycles, fluor)]


def melting(n_points=10):
    temps = np.linspace(65.0, 95.0, n_points)
    return [Mdp(tmp=t, fluor=1.0 - i / n_points) for i, t in enumerate(temps)]


def build_document():
    """Small but complete document touching every collection."""
    rdml = RDML(version="1.2", date_made="2024-10-25T10:00:00")
    rdml.set('id', RdmlId(publisher="lab.example.org", serial_number="0001"))
    rdml.set('experimenter', Experimenter(id="jd", first_name="Jo", last_name="Doe",
                                          email="jo@example.org"))
    rdml.set('documentation', Documentation(id="protocol", text="Standard SYBR protocol"))
    rdml.set('dye', Dye(id="SYBR", dye_chemistry="non-saturating DNA binding dye"))
    rdml.set('sample', Sample(id="S1", type="unkn", quantity=Quantity(value=10, unit="ng")))
    rdml.set('sample', Sample(id="NTC", type="ntc", documentation=["protocol"]))
    rdml.set('target', Target(
        id="GAPDH", type="ref", dye_id="SYBR",
        sequences=Sequences(forward_primer=Oligo(sequence="ACGTACGT"),
                            reverse_primer=Oligo(sequence="TGCATGCA")),
    ))
    rdml.set('target', Target(id="IL6", dye_id="SYBR", amplification_efficiency=1.95))
    rdml.set('thermalCyclingConditions', ThermalCyclingConditions(
        id="cycling", lid_temperature=105, experimenter=["jd"],
        step=[
            Step(nr=1, action=Temperature(temperature=95.0, duration=600)),
            Step(nr=2, action=Temperature(temperature=95.0, duration=15)),
            Step(nr=3, action=Temperature(temperature=60.0, duration=60, measure="real time")),
            Step(nr=4, action=Loop(goto=2, repeat=39)),
        ],
    ))

    run = Run(
        id="run1", instrument="CFX96",
        data_collection_software=DataCollectionSoftware(name="CFX Manager", version="3.1"),
        thermal_cycling_conditions="cycling",
        pcr_format=PcrFormat(rows=8, columns=12, row_label="ABC", column_label="123"),
        react=[
            React(id=1, sample="S1", data=[
                Data(tar="GAPDH", cq=18.2, adp=amplification(40), mdp=melting()),
                Data(tar="IL6", cq=24.7, bg_fluor=BgFluor(intercept=0.05),
                     adp=amplification(40, shift=5)),
            ]),
            React(id=13, sample="NTC", data=[Data(tar="GAPDH", adp=amplification(40, shift=30))]),
        ],
    )
    rdml.set('experiment', Experiment(id="exp1", run=[run]))
    rdml.set('dilutions', Dilution(target="GAPDH",
                                   point=[DilutionPoint(sample="S1", value=1.0)]))
    rdml.set('conditions', Condition(sample="S1", value="treated"))
    return rdml


@pytest.fixture
def rdml():
    return build_document()


@pytest.fixture
def make_rdml():
    """Factory for tests that need more than one fresh document."""
    return build_document
