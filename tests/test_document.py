"""Document tree: collection access, merge, validation and plain-data view."""

import pytest

from RDMLOrganizer import (
    RDML, DanglingReferenceError, Data, Dye, Experiment, React, Run, Sample,
    Target, TypeMismatch,
)
from RDMLOrganizer.core.defaults import DEFAULT_VERSION


def test_new_document_defaults():
    rdml = RDML()
    assert rdml.version == DEFAULT_VERSION
    assert rdml.list('experiment') == []
    assert rdml.get('dye', "SYBR") is None


def test_collection_names_accept_tag_and_attribute(make_rdml):
    rdml = make_rdml()
    assert rdml.collection('thermalCyclingConditions') is rdml.thermal_cycling_conditions
    assert rdml.collection('thermal_cycling_conditions') is rdml.thermal_cycling_conditions
    with pytest.raises(ValueError, match="Unknown collection"):
        rdml.collection('plates')


def test_set_get_remove(rdml):
    rdml.set('dye', Dye(id="FAM", dye_chemistry="hydrolysis probe"))
    assert rdml.list('dye') == ["SYBR", "FAM"]
    assert rdml.get('dye', "FAM").dye_chemistry == "hydrolysis probe"
    removed = rdml.remove('dye', "FAM")
    assert removed.id == "FAM"
    with pytest.raises(KeyError):
        rdml.remove('dye', "FAM")


def test_set_checks_entity_type(rdml):
    with pytest.raises(TypeMismatch):
        rdml.set('dye', Sample(id="S9"))


def test_set_replaces_in_place(rdml):
    rdml.set('sample', Sample(id="S1", type="std"))
    assert rdml.list('sample') == ["S1", "NTC"]
    assert rdml.get('sample', "S1").type == "std"


# ----------------------------------------------------------------------------
# merge
# ----------------------------------------------------------------------------

def test_merge_last_wins_and_appends(make_rdml, capsys):
    base = make_rdml()
    other = RDML()
    other.set('sample', Sample(id="S2"))
    other.set('sample', Sample(id="S1", type="pos"))
    other.set('dye', Dye(id="FAM"))

    result = base.merge(other)

    assert result is base
    assert base.list('sample') == ["S1", "NTC", "S2"]
    assert base.get('sample', "S1").type == "pos"
    assert base.list('dye') == ["SYBR", "FAM"]
    assert "✓ Merged document: 2 new entries" in capsys.readouterr().out


def test_merge_copies_entities():
    base = RDML()
    other = RDML()
    other.set('dye', Dye(id="FAM"))
    base.merge(other)
    other.get('dye', "FAM").description = "changed"
    assert base.get('dye', "FAM").description is None


def test_merge_replaces_whole_experiment(make_rdml):
    base = make_rdml()
    other = RDML()
    other.set('experiment', Experiment(id="exp1", run=[Run(id="run2")]))
    base.merge(other)
    assert list(base.get('experiment', "exp1").run) == ["run2"]


# ----------------------------------------------------------------------------
# validation
# ----------------------------------------------------------------------------

def test_valid_document_has_no_dangling_references(rdml):
    assert rdml.dangling_references() == []
    rdml.validate()


def test_validate_lists_every_dangling_reference(rdml):
    rdml.set('target', Target(id="ACTB", dye_id="ROX"))
    rdml.get('experiment', "exp1").run["run1"].react.add(
        React(id=2, sample="S404", data=[Data(tar="GAPDH", cq=20.0)]))

    with pytest.raises(DanglingReferenceError) as excinfo:
        rdml.validate()

    refs = excinfo.value.references
    assert [(ref.collection, ref.id) for ref in refs] == [("dye", "ROX"), ("sample", "S404")]
    assert refs[0].path == "/rdml/target[@id='ACTB']/dyeId"
    assert refs[1].path == "/rdml/experiment[@id='exp1']/run[@id='run1']/react[@id='2']/sample"
    assert "S404" in str(excinfo.value)


# ----------------------------------------------------------------------------
# plain data
# ----------------------------------------------------------------------------

def test_dict_round_trip(rdml):
    data = rdml.to_dict()
    assert data['version'] == "1.2"
    assert [s['id'] for s in data['sample']] == ["S1", "NTC"]
    assert RDML.from_dict(data) == rdml


def test_equality_is_order_sensitive():
    first, second = RDML(), RDML()
    first.set('dye', Dye(id="a"))
    first.set('dye', Dye(id="b"))
    second.set('dye', Dye(id="b"))
    second.set('dye', Dye(id="a"))
    assert first != second
