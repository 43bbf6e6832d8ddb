#!/usr/bin/env python3
"""
Thermal cycling programs.

A ``Step`` carries its number, an optional description and exactly one
action.  The action is a tagged union over ``STEP_REGISTRY``; the XML tag of
the action element is the tag of the union member::

    <step>
      <nr>3</nr>
      <loop><goto>1</goto><repeat>39</repeat></loop>
    </step>
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from lxml import etree

from RDMLOrganizer.core.errors import (
    InvalidValueError,
    MissingRequiredField,
    ParseError,
    TypeMismatch,
)
from RDMLOrganizer.schema.base import SchemaType, element
from RDMLOrganizer.schema.references import DocumentationRef, ExperimenterRef

MEASURE_TYPES = ("real time", "meltcurve")


@dataclass
class Temperature(SchemaType):
    """Hold at one temperature (seconds)."""
    temperature: float = element(float, required=True)
    duration: int = element(int, required=True)
    temperature_change: Optional[float] = element(float)
    duration_change: Optional[int] = element(int)
    measure: Optional[str] = element(str, choices=MEASURE_TYPES)
    ramp: Optional[float] = element(float)


@dataclass
class Gradient(SchemaType):
    """Hold with a temperature gradient across the block."""
    high_temperature: float = element(float, required=True)
    low_temperature: float = element(float, required=True)
    duration: int = element(int, required=True)
    temperature_change: Optional[float] = element(float)
    duration_change: Optional[int] = element(int)
    measure: Optional[str] = element(str, choices=MEASURE_TYPES)
    ramp: Optional[float] = element(float)

    def _check(self):
        if self.low_temperature > self.high_temperature:
            raise InvalidValueError(type(self).__name__, 'low_temperature',
                                    "must not exceed high_temperature")


@dataclass
class Loop(SchemaType):
    """Jump back to step ``goto`` another ``repeat`` times."""
    goto: int = element(int, required=True)
    repeat: int = element(int, required=True)

    def _check(self):
        if self.goto < 1:
            raise InvalidValueError('Loop', 'goto', f"step number must be >= 1, got {self.goto}")
        if self.repeat < 0:
            raise InvalidValueError('Loop', 'repeat', f"must be >= 0, got {self.repeat}")


@dataclass
class Pause(SchemaType):
    temperature: float = element(float, required=True)


@dataclass
class LidOpen(SchemaType):
    pass


# ---------------------------------------------------------------------------
# Registry of step actions.
# Format: xml tag -> action type.  Order is the schema's choice order.
# ---------------------------------------------------------------------------
STEP_REGISTRY = {
    'temperature': Temperature,
    'gradient':    Gradient,
    'loop':        Loop,
    'pause':       Pause,
    'lidOpen':     LidOpen,
}

StepAction = Union[Temperature, Gradient, Loop, Pause, LidOpen]


def action_tag(action) -> str:
    """XML tag of a step action; anything outside the union is a TypeMismatch."""
    if isinstance(action, Temperature):
        return 'temperature'
    if isinstance(action, Gradient):
        return 'gradient'
    if isinstance(action, Loop):
        return 'loop'
    if isinstance(action, Pause):
        return 'pause'
    if isinstance(action, LidOpen):
        return 'lidOpen'
    raise TypeMismatch('Step', 'action',
                       f"expected one of {', '.join(t.__name__ for t in STEP_REGISTRY.values())}, "
                       f"got {type(action).__name__}")


@dataclass
class Step(SchemaType):
    nr: int = element(int, required=True)
    description: Optional[str] = element(str)
    action: Optional[StepAction] = None

    def _check(self):
        if self.action is None:
            raise MissingRequiredField('Step', 'action')
        action_tag(self.action)
        if self.nr < 1:
            raise InvalidValueError('Step', 'nr', f"must be >= 1, got {self.nr}")
        if isinstance(self.action, Loop) and self.action.goto > self.nr:
            raise InvalidValueError('Step', 'action',
                                    f"loop goto {self.action.goto} points past step {self.nr}")

    def _extra_xml(self, node: etree._Element):
        node.append(self.action.to_xml(action_tag(self.action)))

    @classmethod
    def _parse_extra(cls, tag: str, child: etree._Element, path: str,
                     kwargs: Dict[str, Any]) -> bool:
        action_cls = STEP_REGISTRY.get(tag)
        if action_cls is None:
            return False
        if 'action' in kwargs:
            raise ParseError(path, "a step holds exactly one action")
        kwargs['action'] = action_cls.from_xml(child, path)
        return True

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['action'] = {'type': action_tag(self.action), **self.action.to_dict()}
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'Step':
        action = data.get('action')
        if action is not None:
            action = dict(action)
            action_cls = STEP_REGISTRY[action.pop('type')]
            action = action_cls.from_dict(action)
        return cls(nr=data.get('nr'), description=data.get('description'), action=action)


@dataclass
class ThermalCyclingConditions(SchemaType):
    """A thermal cycling program: ordered steps plus lid temperature."""
    id: str = element(str, required=True, attr=True)
    description: Optional[str] = element(str)
    documentation: List[DocumentationRef] = element(DocumentationRef, many=True)
    lid_temperature: Optional[float] = element(float)
    experimenter: List[ExperimenterRef] = element(ExperimenterRef, many=True)
    step: List[Step] = element(Step, many=True, required=True)

    def _check(self):
        numbers = [s.nr for s in self.step]
        duplicates = sorted({nr for nr in numbers if numbers.count(nr) > 1})
        if duplicates:
            raise InvalidValueError('ThermalCyclingConditions', 'step',
                                    f"duplicate step number(s) {duplicates}")
        for s in self.step:
            if isinstance(s.action, Loop) and s.action.goto not in numbers:
                raise InvalidValueError('ThermalCyclingConditions', 'step',
                                        f"step {s.nr} loops to missing step {s.action.goto}")
