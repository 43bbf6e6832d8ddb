#!/usr/bin/env python3
"""
Experiment → Run → React → Data ownership hierarchy.

* ``Experiment.run``  – IdMap of Run, keyed by run id
* ``Run.react``       – IdMap of React, keyed by the (integer) well number
* ``React.data``      – IdMap of Data, keyed by target id
* ``Data.adp/mdp``    – amplification / melting curve points

Only the curves and the computed values live here; how they were computed
is the caller's business.
"""

from dataclasses import dataclass
from typing import List, Optional

from RDMLOrganizer.core.errors import InvalidValueError
from RDMLOrganizer.schema.base import IdMap, SchemaType, element
from RDMLOrganizer.schema.references import (
    DocumentationRef,
    ExperimenterRef,
    SampleRef,
    TargetRef,
    ThermalCyclingConditionsRef,
)

LABEL_FORMATS = ("ABC", "123", "A1a1")
CQ_DETECTION_METHODS = (
    "automated threshold and baseline settings",
    "manual threshold and baseline settings",
    "second derivative maximum",
    "other",
)


# ---------------------------------------------------------------------------
# reaction data
# ---------------------------------------------------------------------------

@dataclass
class Adp(SchemaType):
    """Amplification data point."""
    cyc: float = element(float, required=True)
    tmp: Optional[float] = element(float)
    fluor: float = element(float, required=True)


@dataclass
class Mdp(SchemaType):
    """Melting data point."""
    tmp: float = element(float, required=True)
    fluor: float = element(float, required=True)


@dataclass
class BgFluor(SchemaType):
    slope: Optional[float] = element(float)
    intercept: float = element(float, required=True)


@dataclass
class Data(SchemaType):
    """Everything measured or computed for one target in one reaction."""
    tar: TargetRef = element(TargetRef, required=True)
    cq: Optional[float] = element(float)
    n0: Optional[float] = element(float, tag="N0")
    amp_eff_met: Optional[str] = element(str)
    amp_eff: Optional[float] = element(float)
    amp_eff_se: Optional[float] = element(float, tag="ampEffSE")
    melt_temp: Optional[float] = element(float)
    excl: Optional[str] = element(str)
    note: Optional[str] = element(str)
    adp: List[Adp] = element(Adp, many=True)
    mdp: List[Mdp] = element(Mdp, many=True)
    end_pt: Optional[float] = element(float)
    bg_fluor: Optional[BgFluor] = element(BgFluor)
    quant_fluor: Optional[float] = element(float)

    def key(self):
        return self.tar.id

    def path_label(self, tag: str) -> str:
        return f"{tag}[tar/@id='{self.tar.id}']"

    def has_values(self) -> bool:
        """True if any computed value is present."""
        return any(v is not None for v in (
            self.cq, self.n0, self.amp_eff, self.amp_eff_se, self.melt_temp,
            self.end_pt, self.bg_fluor, self.quant_fluor,
        ))


@dataclass
class React(SchemaType):
    """One well (reaction) of a run."""
    id: int = element(int, required=True, attr=True)
    sample: Optional[SampleRef] = element(SampleRef)
    data: IdMap = element(Data, keyed=True)

    def _check(self):
        if self.id < 1:
            raise InvalidValueError('React', 'id', f"must be a positive integer, got {self.id}")


# ---------------------------------------------------------------------------
# run & experiment
# ---------------------------------------------------------------------------

@dataclass
class DataCollectionSoftware(SchemaType):
    name: str = element(str, required=True)
    version: str = element(str, required=True)


@dataclass
class PcrFormat(SchemaType):
    """Plate geometry used to turn react ids into well positions."""
    rows: int = element(int, required=True)
    columns: int = element(int, required=True)
    row_label: str = element(str, required=True, choices=LABEL_FORMATS)
    column_label: str = element(str, required=True, choices=LABEL_FORMATS)

    def position(self, react_id: int) -> str:
        """Well label of *react_id*, e.g. 13 -> ``'B01'`` on a 8x12 ABC/123 plate."""
        row, col = divmod(int(react_id) - 1, self.columns)
        return (_label(row, self.row_label, len(str(self.rows)))
                + _label(col, self.column_label, max(2, len(str(self.columns)))))


def _label(index: int, style: str, width: int) -> str:
    if style == "123":
        return f"{index + 1:0{width}d}"
    # ABC and A1a1 rows are lettered, spreadsheet style past Z
    letters = ""
    index += 1
    while index:
        index, rem = divmod(index - 1, 26)
        letters = chr(ord('A') + rem) + letters
    return letters


@dataclass
class Run(SchemaType):
    """One instrument run: settings, plate format and its reactions."""
    id: str = element(str, required=True, attr=True)
    description: Optional[str] = element(str)
    documentation: List[DocumentationRef] = element(DocumentationRef, many=True)
    experimenter: List[ExperimenterRef] = element(ExperimenterRef, many=True)
    instrument: Optional[str] = element(str)
    data_collection_software: Optional[DataCollectionSoftware] = element(DataCollectionSoftware)
    background_determination_method: Optional[str] = element(str)
    cq_detection_method: Optional[str] = element(str, choices=CQ_DETECTION_METHODS)
    thermal_cycling_conditions: Optional[ThermalCyclingConditionsRef] = \
        element(ThermalCyclingConditionsRef)
    pcr_format: Optional[PcrFormat] = element(PcrFormat)
    run_date: Optional[str] = element(str)
    react: IdMap = element(React, keyed=True)

    def position(self, react_id) -> str:
        """Well label of *react_id*; the id itself when the plate format is unknown."""
        if self.pcr_format is None or self.pcr_format.columns < 1:
            return str(react_id)
        return self.pcr_format.position(react_id)


@dataclass
class Experiment(SchemaType):
    id: str = element(str, required=True, attr=True)
    description: Optional[str] = element(str)
    documentation: List[DocumentationRef] = element(DocumentationRef, many=True)
    run: IdMap = element(Run, keyed=True)
