"""Entity construction, coercion and the XML / dict views of single entities."""

import pytest
from lxml import etree

from RDMLOrganizer import (
    Adp, Condition, Data, Dilution, DilutionPoint, Dye, Gradient, IdMap,
    InvalidValueError, LidOpen, Loop, MissingRequiredField, PcrFormat, React,
    Run, Sample, SampleRef, Step, Target, TargetRef, Temperature,
    ThermalCyclingConditions, TypeMismatch,
)
from RDMLOrganizer.core.errors import SchemaError
from RDMLOrganizer.schema import STEP_REGISTRY
from RDMLOrganizer.schema.thermal import action_tag


# ----------------------------------------------------------------------------
# construction
# ----------------------------------------------------------------------------

def test_wrong_type_raises_type_mismatch():
    with pytest.raises(TypeMismatch) as excinfo:
        Data(tar="GAPDH", cq="18.2")
    assert excinfo.value.type_name == "Data"
    assert excinfo.value.field_name == "cq"
    assert isinstance(excinfo.value, TypeError)


def test_enum_membership_is_checked():
    with pytest.raises(TypeMismatch, match="not one of"):
        Sample(id="S1", type="unknown")


def test_missing_required_field():
    with pytest.raises(MissingRequiredField) as excinfo:
        Target(id="GAPDH")
    assert excinfo.value.field_name == "dye_id"


def test_bool_is_not_a_number():
    with pytest.raises(TypeMismatch):
        Adp(cyc=True, fluor=1.0)


def test_int_is_accepted_for_float_fields():
    point = Adp(cyc=1, fluor=2)
    assert point.cyc == 1.0 and isinstance(point.cyc, float)


def test_optional_fields_default_to_absent_not_zero():
    data = Data(tar="GAPDH")
    assert data.cq is None
    assert data.adp == []
    assert not data.has_values()
    assert Data(tar="GAPDH", cq=0.0).has_values()


def test_schema_defaults():
    assert Sample(id="S1").type == "unkn"
    assert Target(id="T", dye_id="SYBR").type == "toi"


def test_strings_are_wrapped_in_reference_type():
    react = React(id=1, sample="S1")
    assert isinstance(react.sample, SampleRef)
    assert react.sample == SampleRef("S1")
    assert react.sample.collection == "sample"
    assert TargetRef("x") != SampleRef("x")


def test_react_id_must_be_positive():
    with pytest.raises(InvalidValueError):
        React(id=0)


# ----------------------------------------------------------------------------
# keyed child maps
# ----------------------------------------------------------------------------

def test_duplicate_data_keys_last_write_wins():
    react = React(id=1, data=[Data(tar="A", cq=10.0), Data(tar="B"), Data(tar="A", cq=20.0)])
    assert list(react.data) == ["A", "B"]
    assert react.data["A"].cq == 20.0


def test_idmap_replace_keeps_position_and_order_matters():
    first = IdMap([Dye(id="a"), Dye(id="b")])
    first.add(Dye(id="a", description="new"))
    assert list(first) == ["a", "b"]
    assert first["a"].description == "new"
    assert IdMap([Dye(id="a"), Dye(id="b")]) != IdMap([Dye(id="b"), Dye(id="a")])


def test_idmap_setitem_checks_key():
    ids = IdMap()
    with pytest.raises(ValueError):
        ids["x"] = Dye(id="y")


def test_keyed_field_rejects_scalar():
    with pytest.raises(TypeMismatch):
        React(id=1, data=Data(tar="A"))


# ----------------------------------------------------------------------------
# thermal cycling steps
# ----------------------------------------------------------------------------

def test_loop_constraints():
    with pytest.raises(InvalidValueError):
        Loop(goto=0, repeat=3)
    with pytest.raises(InvalidValueError):
        Loop(goto=1, repeat=-1)
    with pytest.raises(InvalidValueError):
        Step(nr=2, action=Loop(goto=3, repeat=1))


def test_step_requires_exactly_a_known_action():
    with pytest.raises(MissingRequiredField):
        Step(nr=1)
    with pytest.raises(TypeMismatch):
        Step(nr=1, action=Dye(id="SYBR"))


def test_step_action_tags_cover_registry():
    actions = [Temperature(temperature=95.0, duration=10),
               Gradient(high_temperature=65.0, low_temperature=55.0, duration=30),
               Loop(goto=1, repeat=2), LidOpen()]
    assert [action_tag(a) for a in actions] == ['temperature', 'gradient', 'loop', 'lidOpen']
    assert set(STEP_REGISTRY) == {'temperature', 'gradient', 'loop', 'pause', 'lidOpen'}


def test_gradient_bounds():
    with pytest.raises(InvalidValueError):
        Gradient(high_temperature=55.0, low_temperature=65.0, duration=30)


def test_program_rejects_duplicate_step_numbers():
    hold = Temperature(temperature=95.0, duration=10)
    with pytest.raises(InvalidValueError, match="duplicate"):
        ThermalCyclingConditions(id="p", step=[Step(nr=1, action=hold),
                                               Step(nr=1, action=hold)])
    with pytest.raises(MissingRequiredField):
        ThermalCyclingConditions(id="p")


def test_schema_errors_share_a_base():
    for cls in (TypeMismatch, MissingRequiredField, InvalidValueError):
        assert issubclass(cls, SchemaError)


# ----------------------------------------------------------------------------
# plate positions
# ----------------------------------------------------------------------------

@pytest.mark.parametrize("react_id, expected", [(1, "A01"), (12, "A12"), (13, "B01"), (96, "H12")])
def test_pcr_format_position(react_id, expected):
    plate = PcrFormat(rows=8, columns=12, row_label="ABC", column_label="123")
    assert plate.position(react_id) == expected


def test_run_position_without_format_is_react_id():
    assert Run(id="r").position(7) == "7"


# ----------------------------------------------------------------------------
# element / dict views
# ----------------------------------------------------------------------------

def test_to_xml_uses_camel_case_and_attributes():
    node = Target(id="GAPDH", dye_id="SYBR", amplification_efficiency_se=0.01).to_xml('target')
    assert node.get('id') == "GAPDH"
    tags = [etree.QName(child).localname for child in node]
    assert tags == ['type', 'amplificationEfficiencySE', 'dyeId']
    assert node[2].get('id') == "SYBR"


def test_step_xml_round_trip():
    step = Step(nr=4, description="cycle", action=Loop(goto=2, repeat=39))
    node = step.to_xml('step')
    assert etree.QName(node[-1]).localname == 'loop'
    assert Step.from_xml(node) == step


def test_step_dict_round_trip():
    step = Step(nr=1, action=Temperature(temperature=95.0, duration=600, measure="real time"))
    data = step.to_dict()
    assert data['action']['type'] == 'temperature'
    assert Step.from_dict(data) == step


def test_entity_dict_round_trip():
    react = React(id=3, sample="S1", data=[Data(tar="A", cq=21.5, adp=[Adp(cyc=1, fluor=0.1)])])
    data = react.to_dict()
    assert data['sample'] == {'id': "S1"}
    assert data['data'][0]['tar'] == {'id': "A"}
    assert React.from_dict(data) == react


def test_dilution_series_view():
    series = Dilution(target="GAPDH", point=[DilutionPoint(sample="std1", value=1.0),
                                             DilutionPoint(sample="std2", value=0.1)])
    assert series.key() == "GAPDH"
    assert series.as_dict() == {"std1": 1.0, "std2": 0.1}
    assert Condition(sample="S1", value="treated").key() == "S1"
