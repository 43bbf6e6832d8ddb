#!/usr/bin/env python3
"""
Library-wide defaults.

The parser and serializer take keyword overrides for the version list and
the archive member name.
"""

RDML_NAMESPACE = "http://www.rdml.org"

# Versions whose documents we read.  New documents are written as
# DEFAULT_VERSION; loaded documents keep the version they came with.
SUPPORTED_VERSIONS = ("1.0", "1.1", "1.2", "1.3")
DEFAULT_VERSION = "1.2"

# Name of the markup entry inside a compressed .rdml container
ARCHIVE_MEMBER = "rdml_data.xml"

# ---------------------------------------------------------------------------
# Root element order fixed by the schema.
# Format: (xml tag, RDML attribute name)
# ---------------------------------------------------------------------------
ROOT_ORDER = [
    ('id',                       'id'),
    ('experimenter',             'experimenter'),
    ('documentation',            'documentation'),
    ('dye',                      'dye'),
    ('sample',                   'sample'),
    ('target',                   'target'),
    ('thermalCyclingConditions', 'thermal_cycling_conditions'),
    ('experiment',               'experiment'),
    ('dilutions',                'dilutions'),
    ('conditions',               'conditions'),
]

# Descriptive columns of the tabular projection, in output order
TABLE_COLUMNS = [
    'fdata.name',
    'exp.id',
    'run.id',
    'react.id',
    'position',
    'sample',
    'sample.type',
    'target',
    'target.dyeId',
    'adp',
    'mdp',
]

# x axis column of each fluorescence data-point type
DP_AXES = {
    'adp': 'cyc',
    'mdp': 'tmp',
}

# Data fields that only exist in RDML 1.3 and later (python attribute names)
DATA_FIELDS_SINCE_1_3 = ('n0', 'amp_eff_met', 'amp_eff', 'amp_eff_se', 'melt_temp')
