#!/usr/bin/env python3
"""
RDMLOrganizer: read, build and write RDML qPCR documents.

RDML is the XML exchange format for real-time PCR runs and their
experimental metadata.  This package holds the in-memory object model and
its mapping to and from the markup, plus a tabular view for analysis.

Main Components
---------------
RDML : Document tree
    Top-level collections, merge, validation, load/save
Sample, Target, Dye, Experimenter, Documentation : Metadata entities
ThermalCyclingConditions, Step : PCR program
    Step actions: Temperature, Gradient, Loop, Pause, LidOpen
Experiment, Run, React, Data : Measurements
    Data holds the amplification (Adp) and melting (Mdp) curves

Functions
---------
parse, load : markup -> RDML
to_string, to_bytes, save : RDML -> markup
as_table : one row per (experiment, run, react, target)
get_fdata, set_fdata : fluorescence matrices out of / into the tree

Basic Usage
-----------
>>> from RDMLOrganizer import RDML
>>>
>>> rdml = RDML.load("run.rdml")
>>> tab = rdml.as_table()
>>> fdata = rdml.get_fdata(tab)               # wide: cyc + one column per curve
>>> fdata.iloc[:, 1:] -= fdata.iloc[:, 1:].min()
>>> rdml.set_fdata(fdata, tab)
>>> rdml.save("run_corrected.rdml")
"""

from RDMLOrganizer.version import __version__

__author__ = "RDMLOrganizer Team"

# Import main classes for public API
from RDMLOrganizer.core.document import RDML
from RDMLOrganizer.core.parser import load, parse
from RDMLOrganizer.core.serializer import save, to_bytes, to_string
from RDMLOrganizer.core.table import RowContext, as_table
from RDMLOrganizer.core.fdata import get_fdata, set_fdata
from RDMLOrganizer.core.errors import (
    DanglingReference,
    DanglingReferenceError,
    DuplicateNameError,
    DuplicatePointError,
    InvalidValueError,
    MissingRequiredField,
    ParseError,
    RDMLError,
    RDMLWarning,
    SchemaError,
    TypeMismatch,
    UnknownColumnError,
    UnsupportedVersionError,
    ValidationError,
)
from RDMLOrganizer.schema import (
    Adp, Annotation, BgFluor, CdnaSynthesisMethod, CommercialAssay, Condition,
    Data, DataCollectionSoftware, Dilution, DilutionPoint, Documentation,
    DocumentationRef, Dye, DyeRef, Experiment, Experimenter, ExperimenterRef,
    Gradient, IdMap, IdReference, LidOpen, Loop, Mdp, Oligo, Pause, PcrFormat,
    Quantity, RdmlId, React, Run, Sample, SampleRef, Sequences, Step, Target,
    TargetRef, Temperature, TemplateQuantity, ThermalCyclingConditions,
    ThermalCyclingConditionsRef, XRef,
)


# Define public API
__all__ = [
    # Document
    'RDML',

    # Markup I/O
    'parse',
    'load',
    'to_string',
    'to_bytes',
    'save',

    # Tabular views
    'as_table',
    'RowContext',
    'get_fdata',
    'set_fdata',

    # Metadata entities
    'RdmlId', 'Experimenter', 'Documentation', 'Dye',
    'Sample', 'XRef', 'Annotation', 'Quantity', 'CdnaSynthesisMethod', 'TemplateQuantity',
    'Target', 'Oligo', 'Sequences', 'CommercialAssay',

    # PCR program
    'ThermalCyclingConditions', 'Step',
    'Temperature', 'Gradient', 'Loop', 'Pause', 'LidOpen',

    # Measurements
    'Experiment', 'Run', 'React', 'Data', 'Adp', 'Mdp', 'BgFluor',
    'PcrFormat', 'DataCollectionSoftware',
    'Dilution', 'DilutionPoint', 'Condition',

    # Cross references
    'IdMap', 'IdReference',
    'DyeRef', 'SampleRef', 'TargetRef', 'ThermalCyclingConditionsRef',
    'ExperimenterRef', 'DocumentationRef',

    # Errors
    'RDMLError', 'RDMLWarning', 'SchemaError', 'TypeMismatch',
    'MissingRequiredField', 'InvalidValueError', 'ParseError',
    'UnsupportedVersionError', 'DanglingReference', 'DanglingReferenceError',
    'ValidationError', 'UnknownColumnError', 'DuplicateNameError',
    'DuplicatePointError',
]


# Package information
def get_version():
    """Get package version."""
    return __version__


def get_info():
    """Get package information."""
    return {
        'name': 'RDMLOrganizer',
        'version': __version__,
        'description': 'Read, build and write RDML qPCR documents',
        'author': __author__,
    }


if __name__ == "__main__":
    print("RDMLOrganizer Package")
    print("=" * 50)
    print(f"Version: {__version__}")
    print("\nImport this module to use:")
    print("  from RDMLOrganizer import RDML")
    print("\nAvailable names:")
    for item in __all__:
        print(f"  - {item}")
