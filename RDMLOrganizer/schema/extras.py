#!/usr/bin/env python3
"""
Per-target dilution series and per-sample experimental conditions.

These two collections are not part of the instrument export itself; they
carry the study design alongside it.  Like every root collection, each entry
is one root child named after the collection, written after ``experiment``::

    <dilutions>
      <target id="GAPDH"/>
      <point><sample id="std1"/><value>1.0</value></point>
    </dilutions>
    <conditions><sample id="S1"/><value>treated</value></conditions>
"""

from dataclasses import dataclass
from typing import List

from RDMLOrganizer.schema.base import SchemaType, element
from RDMLOrganizer.schema.references import SampleRef, TargetRef


@dataclass
class DilutionPoint(SchemaType):
    sample: SampleRef = element(SampleRef, required=True)
    value: float = element(float, required=True)


@dataclass
class Dilution(SchemaType):
    """Dilution factor of each standard sample, for one target."""
    target: TargetRef = element(TargetRef, required=True)
    point: List[DilutionPoint] = element(DilutionPoint, many=True)

    def key(self):
        return self.target.id

    def path_label(self, tag: str) -> str:
        return f"{tag}[target/@id='{self.target.id}']"

    def as_dict(self) -> dict:
        """``{sample id: dilution}`` view of the series."""
        return {p.sample.id: p.value for p in self.point}


@dataclass
class Condition(SchemaType):
    sample: SampleRef = element(SampleRef, required=True)
    value: str = element(str, required=True)

    def key(self):
        return self.sample.id

    def path_label(self, tag: str) -> str:
        return f"{tag}[sample/@id='{self.sample.id}']"
