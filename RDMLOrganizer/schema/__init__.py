"""
Schema type library – one dataclass per RDML entity.

COLLECTION_REGISTRY maps each top-level collection tag to the type of its
entries.  Adding a collection: define the type, add one line here and one
line to ``ROOT_ORDER`` in ``RDMLOrganizer.core.defaults``.
"""

from RDMLOrganizer.schema.base       import IdMap, IdReference, SchemaType, element
from RDMLOrganizer.schema.references import (DocumentationRef, DyeRef, ExperimenterRef,
                                             SampleRef, TargetRef,
                                             ThermalCyclingConditionsRef)
from RDMLOrganizer.schema.metadata   import (Annotation, CdnaSynthesisMethod, CommercialAssay,
                                             Documentation, Dye, Experimenter, Oligo,
                                             Quantity, RdmlId, Sample, Sequences, Target,
                                             TemplateQuantity, XRef)
from RDMLOrganizer.schema.thermal    import (STEP_REGISTRY, Gradient, LidOpen, Loop, Pause,
                                             Step, Temperature, ThermalCyclingConditions)
from RDMLOrganizer.schema.experiment import (Adp, BgFluor, Data, DataCollectionSoftware,
                                             Experiment, Mdp, PcrFormat, React, Run)
from RDMLOrganizer.schema.extras     import Condition, Dilution, DilutionPoint

# Format: xml tag of the root child -> entry type
COLLECTION_REGISTRY = {
    'id':                       RdmlId,
    'experimenter':             Experimenter,
    'documentation':            Documentation,
    'dye':                      Dye,
    'sample':                   Sample,
    'target':                   Target,
    'thermalCyclingConditions': ThermalCyclingConditions,
    'experiment':               Experiment,
    'dilutions':                Dilution,
    'conditions':               Condition,
}

__all__ = [
    'SchemaType', 'IdMap', 'IdReference', 'element',
    'DyeRef', 'SampleRef', 'TargetRef', 'ThermalCyclingConditionsRef',
    'ExperimenterRef', 'DocumentationRef',
    'RdmlId', 'Experimenter', 'Documentation', 'Dye',
    'Sample', 'XRef', 'Annotation', 'Quantity', 'CdnaSynthesisMethod', 'TemplateQuantity',
    'Target', 'Oligo', 'Sequences', 'CommercialAssay',
    'Step', 'Temperature', 'Gradient', 'Loop', 'Pause', 'LidOpen',
    'ThermalCyclingConditions', 'STEP_REGISTRY',
    'Experiment', 'Run', 'React', 'Data', 'Adp', 'Mdp', 'BgFluor',
    'PcrFormat', 'DataCollectionSoftware',
    'Dilution', 'DilutionPoint', 'Condition',
    'COLLECTION_REGISTRY',
]
