from collections.abc import Mapping, Sequence, Set


def is_bytes_like(obj):
	"""
	Check if the object holds raw bytes that should be read as text.

	Args:
	obj (object): The object to be checked.

	Returns:
	bool: True for bytes, bytearray and memoryview instances.
	"""
	return isinstance(obj, (bytes, bytearray, memoryview))


def is_sequence(obj):
	"""
	Check if the object is a sequence or a set, but neither a string nor raw bytes.

	Args:
	obj (object): The object to be checked.

	Returns:
	bool: True if the object can be dumped element by element. False otherwise.
	"""
	return isinstance(obj, (Sequence, Set)) and not isinstance(obj, str) and not is_bytes_like(obj)


def is_mapping(obj):
	return isinstance(obj, Mapping)


def is_namedtuple(obj):
	return isinstance(obj, tuple) and isinstance(getattr(type(obj), '_fields', None), tuple)
