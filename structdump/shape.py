import dataclasses
import datetime
import decimal
import enum
import fractions
import inspect
import pathlib
import uuid
from abc import ABC
from types import MappingProxyType
from typing import NamedTuple, Optional

from structdump.type_check import is_bytes_like, is_mapping, is_namedtuple, is_sequence


# values carrying attributes (or slots) that are nevertheless dumped as a single scalar
LEAF_TYPES = (
	str, int, float, complex, bool,
	decimal.Decimal, fractions.Fraction,
	datetime.date, datetime.time, datetime.timedelta, datetime.tzinfo,
	uuid.UUID, pathlib.PurePath, enum.Enum, BaseException,
)

_NO_METADATA = MappingProxyType({})


class Kind(enum.Enum):
	"""The structural category of a value, decided once per traversal step."""
	NULL = 'null'
	STRUCT = 'struct'
	SEQUENCE = 'sequence'
	MAP = 'map'
	LEAF = 'leaf'


class StructField(NamedTuple):
	name: str
	value: object
	metadata: object = _NO_METADATA

	@property
	def exported(self):
		return not self.name.startswith('_')


# <<Capability>>
class TextRepresentable(ABC):
	"""
	Values whose class supplies its own string form.

	Any class defining __str__ somewhere in its MRO below 'object' is a virtual subclass, as long as that
	definition is not one of the builtin types (str, int, exceptions, ...). Builtin scalars are not considered
	text-representable: their str() is nothing but their plain value.
	"""
	@classmethod
	def __subclasshook__(cls, subclass):
		if cls is not TextRepresentable:
			return NotImplemented

		for klass in subclass.__mro__:
			if klass is object:
				return False
			if '__str__' in vars(klass):
				return klass.__module__ != 'builtins'
		return False


def text_of(value) -> Optional[str]:
	"""Returns the custom string form of value, or None if its class does not define one."""
	if isinstance(value, TextRepresentable):
		return str(value)
	return None


def is_empty(value):
	return value is None or (isinstance(value, (str, bytes, bytearray)) and len(value) == 0)


def _is_plain_object(value):
	if isinstance(value, type) or inspect.isroutine(value) or inspect.ismodule(value):
		return False
	return hasattr(value, '__dict__') or len(_slot_names(type(value))) > 0


def _is_record(value):
	return (dataclasses.is_dataclass(value) and not isinstance(value, type)) or is_namedtuple(value)


def kind_of(value) -> Kind:
	"""
	Classify a value for the dump dispatcher.

	Records (dataclass instances and namedtuples) win over their container base classes, while the
	builtin containers win over arbitrary objects, so a dict subclass carrying a __dict__ is still a map.
	"""
	if is_empty(value):
		return Kind.NULL
	if isinstance(value, LEAF_TYPES):
		return Kind.LEAF
	if _is_record(value):
		return Kind.STRUCT
	if is_sequence(value) or is_bytes_like(value):
		return Kind.SEQUENCE
	if is_mapping(value):
		return Kind.MAP
	if _is_plain_object(value):
		return Kind.STRUCT
	return Kind.LEAF


def type_name(value):
	return type(value).__name__


def _slot_names(cls):
	names = []
	for klass in reversed(cls.__mro__):
		slots = vars(klass).get('__slots__', ())
		if isinstance(slots, str):
			slots = (slots,)
		for name in slots:
			if name in ('__dict__', '__weakref__') or name in names:
				continue
			names.append(name)
	return names


def struct_fields(value):
	"""
	Enumerate the fields of a struct-like value in declaration order.

	Args:
		value (object): a value classified as Kind.STRUCT.

	Returns:
		list[StructField]: all fields, including the unexported ones (leading underscore).
	"""
	if dataclasses.is_dataclass(value):
		return [StructField(f.name, getattr(value, f.name, None), f.metadata) for f in dataclasses.fields(value)]

	if is_namedtuple(value):
		return [StructField(name, getattr(value, name)) for name in type(value)._fields]

	fields = [StructField(name, getattr(value, name, None)) for name in _slot_names(type(value))]
	known = {f.name for f in fields}
	fields.extend(
		StructField(name, attribute)
		for name, attribute in getattr(value, '__dict__', {}).items()
		if name not in known
	)
	return fields


def sequence_elements(value):
	"""Elements of a sequence in dump order: sets are sorted when their members allow it."""
	if isinstance(value, (set, frozenset)):
		try:
			return sorted(value)
		except TypeError:
			return list(value)
	return list(value)
