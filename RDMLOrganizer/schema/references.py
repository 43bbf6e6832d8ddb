#!/usr/bin/env python3
"""Typed cross-reference handles, one per referenceable collection."""

from RDMLOrganizer.schema.base import IdReference


class DyeRef(IdReference):
    collection = 'dye'


class SampleRef(IdReference):
    collection = 'sample'


class TargetRef(IdReference):
    collection = 'target'


class ThermalCyclingConditionsRef(IdReference):
    collection = 'thermalCyclingConditions'


class ExperimenterRef(IdReference):
    collection = 'experimenter'


class DocumentationRef(IdReference):
    collection = 'documentation'
