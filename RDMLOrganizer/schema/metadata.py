#!/usr/bin/env python3
"""
Descriptive top-level entities.

Contains:
- RdmlId: publisher-issued identifier of the document
- Experimenter, Documentation
- Dye
- Sample (+ XRef, Annotation, Quantity, CdnaSynthesisMethod, TemplateQuantity)
- Target (+ Oligo, Sequences, CommercialAssay)
"""

from dataclasses import dataclass
from typing import List, Optional

from RDMLOrganizer.schema.base import SchemaType, element
from RDMLOrganizer.schema.references import (
    DocumentationRef,
    DyeRef,
    ThermalCyclingConditionsRef,
)

DYE_CHEMISTRIES = (
    "non-saturating DNA binding dye",
    "saturating DNA binding dye",
    "hybridization probe",
    "hydrolysis probe",
    "labelled forward primer",
    "labelled reverse primer",
    "DNA-zyme probe",
)
SAMPLE_TYPES = ("unkn", "ntc", "nac", "std", "ntp", "nrt", "pos", "opt")
QUANTITY_UNITS = ("cop", "fold", "dil", "nMol", "ng", "other")
PRIMING_METHODS = ("oligo-dt", "random", "target-specific", "oligo-dt and random", "other")
NUCLEOTIDES = ("DNA", "genomic DNA", "cDNA", "RNA")
TARGET_TYPES = ("ref", "toi")


@dataclass
class RdmlId(SchemaType):
    """Identifier of the whole document as issued by a publisher."""
    publisher: str = element(str, required=True)
    serial_number: str = element(str, required=True)
    md5_hash: Optional[str] = element(str, tag="MD5Hash")

    def key(self):
        return self.publisher

    def path_label(self, tag: str) -> str:
        return f"{tag}[publisher='{self.publisher}']"


@dataclass
class Experimenter(SchemaType):
    id: str = element(str, required=True, attr=True)
    first_name: str = element(str, required=True)
    last_name: str = element(str, required=True)
    email: Optional[str] = element(str)
    lab_name: Optional[str] = element(str)
    lab_address: Optional[str] = element(str)


@dataclass
class Documentation(SchemaType):
    id: str = element(str, required=True, attr=True)
    text: Optional[str] = element(str)


@dataclass
class Dye(SchemaType):
    """Fluorescent dye used to detect a target."""
    id: str = element(str, required=True, attr=True)
    description: Optional[str] = element(str)
    dye_chemistry: Optional[str] = element(str, choices=DYE_CHEMISTRIES)
    d_ntps: Optional[float] = element(float, tag="dNTPs")
    dye_conc: Optional[float] = element(float)


# ---------------------------------------------------------------------------
# sample
# ---------------------------------------------------------------------------

@dataclass
class XRef(SchemaType):
    """Link to an external database entry."""
    name: Optional[str] = element(str)
    id: Optional[str] = element(str)


@dataclass
class Annotation(SchemaType):
    property: str = element(str, required=True)
    value: str = element(str, required=True)


@dataclass
class Quantity(SchemaType):
    value: float = element(float, required=True)
    unit: str = element(str, required=True, choices=QUANTITY_UNITS)


@dataclass
class CdnaSynthesisMethod(SchemaType):
    enzyme: Optional[str] = element(str)
    priming_method: Optional[str] = element(str, choices=PRIMING_METHODS)
    dnase_treatment: Optional[bool] = element(bool)
    thermal_cycling_conditions: Optional[ThermalCyclingConditionsRef] = \
        element(ThermalCyclingConditionsRef)


@dataclass
class TemplateQuantity(SchemaType):
    conc: Optional[float] = element(float)
    nucleotide: Optional[str] = element(str, choices=NUCLEOTIDES)


@dataclass
class Sample(SchemaType):
    """
    A biological sample or control put into one or more reactions.

    ``type`` defaults to ``"unkn"`` (unknown sample) as in the schema.
    """
    id: str = element(str, required=True, attr=True)
    description: Optional[str] = element(str)
    documentation: List[DocumentationRef] = element(DocumentationRef, many=True)
    x_ref: List[XRef] = element(XRef, many=True, tag="xRef")
    annotation: List[Annotation] = element(Annotation, many=True)
    type: str = element(str, required=True, choices=SAMPLE_TYPES, default="unkn")
    inter_run_calibrator: Optional[bool] = element(bool)
    double_stranded: Optional[bool] = element(bool)
    quantity: Optional[Quantity] = element(Quantity)
    calibrator_sample: Optional[bool] = element(bool)
    cdna_synthesis_method: Optional[CdnaSynthesisMethod] = element(CdnaSynthesisMethod)
    template_quantity: Optional[TemplateQuantity] = element(TemplateQuantity)


# ---------------------------------------------------------------------------
# target
# ---------------------------------------------------------------------------

@dataclass
class Oligo(SchemaType):
    three_prime_tag: Optional[str] = element(str)
    five_prime_tag: Optional[str] = element(str)
    sequence: str = element(str, required=True)
    oligo_conc: Optional[float] = element(float)


@dataclass
class Sequences(SchemaType):
    forward_primer: Optional[Oligo] = element(Oligo)
    reverse_primer: Optional[Oligo] = element(Oligo)
    probe1: Optional[Oligo] = element(Oligo)
    probe2: Optional[Oligo] = element(Oligo)
    amplicon: Optional[Oligo] = element(Oligo)


@dataclass
class CommercialAssay(SchemaType):
    company: str = element(str, required=True)
    order_number: str = element(str, required=True)


@dataclass
class Target(SchemaType):
    """A nucleic acid sequence detected in reactions, read through one dye."""
    id: str = element(str, required=True, attr=True)
    description: Optional[str] = element(str)
    documentation: List[DocumentationRef] = element(DocumentationRef, many=True)
    x_ref: List[XRef] = element(XRef, many=True, tag="xRef")
    type: str = element(str, required=True, choices=TARGET_TYPES, default="toi")
    amplification_efficiency_method: Optional[str] = element(str)
    amplification_efficiency: Optional[float] = element(float)
    amplification_efficiency_se: Optional[float] = element(float, tag="amplificationEfficiencySE")
    melting_temperature: Optional[float] = element(float)
    detection_limit: Optional[float] = element(float)
    dye_id: DyeRef = element(DyeRef, required=True)
    sequences: Optional[Sequences] = element(Sequences)
    commercial_assay: Optional[CommercialAssay] = element(CommercialAssay)
