import io
import json
import logging

from structdump.call_result import ErrorResult, ValidResult
from structdump.errors import DumpError
from structdump.key_format import case_formatter, default_formatter, format_key
from structdump.shape import Kind, kind_of, sequence_elements, struct_fields, text_of, type_name
from structdump.type_check import is_bytes_like, is_mapping, is_sequence

logger = logging.getLogger(__name__)

TYPE_KEY = '__Type__'
LEN_KEY = '__Len__'

_TRUE_WORDS = {'1', 'true', 'yes', 'on'}
_FALSE_WORDS = {'0', 'false', 'no', 'off', ''}


def as_flag(value):
	"""Coerce loosely typed option values ('yes', '0', True, ...) to bool."""
	if isinstance(value, bool):
		return value
	word = str(value).strip().lower()
	if word in _TRUE_WORDS:
		return True
	if word in _FALSE_WORDS:
		return False
	raise ValueError(f"not a flag value: '{value}'")


class ExtraFields:
	"""
	Switches for additional entries of a dump. All default to False.

	Args:
		emit_len (bool): add '__Len__' entries for sequences, maps and (with detailed_struct) structs.
		emit_type (bool): add '__Type__' entries: the type name for structs, 'Map' and 'Array' for containers.
		detailed_struct (bool): add the raw struct value at the key of nested structs.
		detailed_map (bool): add the raw mapping at the key of nested maps.
		detailed_array (bool): add the raw sequence at the key of nested sequences.
		deep_json (bool): expand string leaves holding a JSON array or object.
		use_json_tag (bool): name dataclass fields after the "json" entry of their field metadata.
	"""
	FLAGS = ('emit_len', 'emit_type', 'detailed_struct', 'detailed_map', 'detailed_array', 'deep_json', 'use_json_tag')

	def __init__(self, **flags):
		for name in self.FLAGS:
			setattr(self, name, False)
		for name, value in flags.items():
			if name not in self.FLAGS:
				raise TypeError(f"unknown extra field: '{name}'")
			setattr(self, name, as_flag(value))

	def __repr__(self):
		enabled = [name for name in self.FLAGS if getattr(self, name)]
		return f"ExtraFields({', '.join(enabled)})"


def _compact_default(obj):
	if is_bytes_like(obj):
		return bytes(obj).decode('utf-8', errors='replace')
	if kind_of(obj) is Kind.STRUCT:
		return {f.name: f.value for f in struct_fields(obj) if f.exported}
	if is_mapping(obj):
		return dict(obj)
	if is_sequence(obj):
		return sequence_elements(obj)
	text = text_of(obj)
	if text is not None:
		return text
	raise TypeError(f'{obj.__class__.__name__} is not json-serializable')


def print_value(value):
	"""
	Canonical string form of an accumulator value.

	Strings pass unchanged, text-representable values use their own form, everything else is encoded
	as compact JSON (structs by their exported fields). The final fallback is str().
	"""
	if isinstance(value, str):
		return value
	text = text_of(value)
	if text is not None:
		return text
	try:
		return json.dumps(value, default=_compact_default, separators=(',', ':'), ensure_ascii=False, allow_nan=False)
	except (TypeError, ValueError, RecursionError):
		return str(value)


def report_lines(string_map):
	"""Sorted 'key: value' lines, or the bare 'key:' for empty values."""
	return [
		f'{key}: {string_map[key]}' if string_map[key] != '' else f'{key}:'
		for key in sorted(string_map)
	]


def parse_embedded_json(text):
	"""Returns the list or dict encoded in text, or None if text is no JSON array or object."""
	try:
		parsed = json.loads(text)
	except (ValueError, RecursionError):
		return None
	if isinstance(parsed, (list, dict)):
		return parsed
	return None


class Encoder:
	"""
	Flattens values of arbitrary shape into a mapping of separator-joined paths.

	Traversal is depth-first. Structs, maps and sequences are decomposed, everything else is stored as a leaf.
	The first level of a root struct is named after its type.

	Args:
		writer (TextIO): the sink of fdump(). Defaults to an in-memory buffer.
		separator (str): joins the path segments of a key. Defaults to '.'.
		prefix (str): if set, prepended to every key, followed by the separator.
		formatters (list[Callable[[str, int], str]]): applied in order to every path segment.
		array_json_notation (bool): name sequence elements 'name[i]' instead of appending a segment 'namei'.
		disable_type_prefix (bool): do not insert the type name for root structs and struct map values.
		field_namer (Callable[[type, str], str]): if set, resolves the key segment of struct fields; falsy results
			fall back to the default naming.
		extra_fields (ExtraFields): switches for metadata entries.
	"""
	OPTIONS = (
		'separator', 'prefix', 'formatters', 'array_json_notation', 'disable_type_prefix', 'field_namer',
		'extra_fields'
	)
	STRING_OPTIONS = ('separator', 'prefix')
	FLAG_OPTIONS = ('array_json_notation', 'disable_type_prefix')

	def __init__(self, writer=None, **options):
		self.writer = writer if writer is not None else io.StringIO()
		self.formatters = [default_formatter()]
		self.separator = '.'
		self.prefix = ''
		self.array_json_notation = False
		self.disable_type_prefix = False
		self.field_namer = None
		self.extra_fields = ExtraFields()
		self.configure(**options)

	def configure(self, **options):
		"""
		Set encoder options and extra field flags by name. Returns the encoder for chaining.

		Raises:
			TypeError: on unknown option names.
		"""
		for name, value in options.items():
			if name in self.FLAG_OPTIONS:
				setattr(self, name, as_flag(value))
			elif name in self.OPTIONS:
				setattr(self, name, value)
			elif name in ExtraFields.FLAGS:
				setattr(self.extra_fields, name, as_flag(value))
			else:
				raise TypeError(f"unknown encoder option: '{name}'")
		return self

	@classmethod
	def from_options(cls, options, writer=None):
		"""
		Build an encoder from string-valued options, i.e. HTTP query parameters.

		Args:
			options (Mapping[str, str]): 'separator', 'prefix', 'case' ('default', 'lower' or 'upper') and the
				boolean options and extra field flags as '1'/'0', 'true'/'false', 'yes'/'no' or 'on'/'off'.
			writer (TextIO): the sink of fdump().

		Raises:
			TypeError: on unknown option names.
			ValueError: on malformed flag values or unknown cases.
		"""
		encoder = cls(writer)
		for name, raw in options.items():
			if name in cls.STRING_OPTIONS:
				setattr(encoder, name, str(raw))
			elif name == 'case':
				encoder.formatters = [case_formatter(str(raw))]
			elif name in cls.FLAG_OPTIONS or name in ExtraFields.FLAGS:
				encoder.configure(**{name: as_flag(raw)})
			else:
				raise TypeError(f"unknown encoder option: '{name}'")
		return encoder

	# --- public entry points

	def to_map(self, value):
		"""
		Dump value into a dict of formatted keys to the original leaf values.

		Returns:
			CallResult: ValidResult(dict[str, object]), or ErrorResult carrying a DumpError.
		"""
		return self._run(value)

	def to_string_map(self, value):
		"""
		Dump value into a dict of formatted keys to the canonical string form of each entry.

		Returns:
			CallResult: ValidResult(dict[str, str]), or ErrorResult carrying a DumpError.
		"""
		return self._run(value).then(lambda accumulator: {k: print_value(v) for k, v in accumulator.items()})

	def fdump(self, value):
		"""
		Write the sorted report of value to the encoder's writer.

		Returns:
			CallResult: ValidResult(number of lines written), or an ErrorResult.
		"""
		return self.to_string_map(value).then(self._write_report)

	def sdump(self, value):
		"""
		Returns:
			CallResult: ValidResult(str) holding the same report fdump() writes, or an ErrorResult.
		"""
		return self.to_string_map(value).then(lambda string_map: ''.join(f'{line}\n' for line in report_lines(string_map)))

	def config_key(self, key):
		"""
		Normalize a dumped key for hierarchical configuration lookups: the prefix is stripped, the separator
		becomes '.' and the result is lower case. I.e. 'Prefix.User.Name' -> 'user.name'.
		"""
		if self.prefix:
			key = key.replace(self.prefix + self.separator, '', 1)
		return key.replace(self.separator, '.').lower()

	def _write_report(self, string_map):
		lines = report_lines(string_map)
		for line in lines:
			self.writer.write(f'{line}\n')
		return len(lines)

	def _run(self, value):
		# the single recovery boundary: handlers below propagate every fault unchanged
		accumulator = {}
		try:
			self._visit(accumulator, value, ())
		except MemoryError:
			raise
		except Exception as ex:
			logger.warning('dump of %s failed: %s', type_name(value), ex)
			return ErrorResult.from_exception(DumpError.wrap(value, ex))

		logger.debug('dumped %s into %d entries', type_name(value), len(accumulator))
		return ValidResult(accumulator)

	# --- traversal

	def _key(self, path):
		return format_key(path, self.formatters, self.separator, self.prefix)

	def _emit(self, accumulator, path, value):
		accumulator[self._key(path)] = value

	def _visit(self, accumulator, value, path):
		"""
		Dispatch by kind, using the convention:

			_visit_<kind>(accumulator, value, path)

		path is a tuple: every handler extends a copy for its children.
		"""
		handler = getattr(self, f'_visit_{kind_of(value).value}')
		handler(accumulator, value, path)

	def _visit_null(self, accumulator, value, path):
		if path:
			self._emit(accumulator, path, '')

	def _visit_leaf(self, accumulator, value, path):
		if self.extra_fields.deep_json and isinstance(value, str):
			parsed = parse_embedded_json(value)
			if parsed is not None:
				self._visit(accumulator, parsed, path)
				return
		self._emit(accumulator, path, value)

	def _visit_struct(self, accumulator, value, path):
		extra = self.extra_fields
		if extra.emit_type:
			self._emit(accumulator, path + (TYPE_KEY,), type_name(value))
		if not path and not self.disable_type_prefix:
			path = (type_name(value),)

		fields = struct_fields(value)
		if extra.detailed_struct:
			if extra.emit_len:
				self._emit(accumulator, path + (LEN_KEY,), len(fields))
			if len(path) > 1:
				self._emit(accumulator, path, value)

		has_exported = False
		for field in fields:
			if not field.exported:
				continue
			has_exported = True
			self._visit(accumulator, field.value, path + (self._field_segment(value, field),))

		if not has_exported:
			text = text_of(value)
			if text is not None:
				self._emit(accumulator, path, text)

	def _field_segment(self, owner, field):
		if self.field_namer is not None:
			name = self.field_namer(type(owner), field.name)
			if name:
				return name

		if self.extra_fields.use_json_tag:
			tag = field.metadata.get('json', '') or ''
			name = tag.split(',')[0].strip()
			if name and name != 'omitempty':
				return name

		return field.name

	def _visit_sequence(self, accumulator, value, path):
		if is_bytes_like(value):
			self._visit(accumulator, bytes(value).decode('utf-8', errors='replace'), path)
			return

		extra = self.extra_fields
		elements = sequence_elements(value)
		if extra.emit_type:
			self._emit(accumulator, path + (TYPE_KEY,), 'Array')
		if extra.emit_len:
			self._emit(accumulator, path + (LEN_KEY,), len(elements))
		if extra.detailed_array and path:
			self._emit(accumulator, path, value)

		for index, element in enumerate(elements):
			element_path = self._element_path(path, index)
			# the custom text form is recorded in addition to, not instead of, the structural dump
			text = text_of(element)
			if text is not None:
				self._emit(accumulator, element_path, text)
			self._visit(accumulator, element, element_path)

	def _element_path(self, path, index):
		if path:
			last = path[-1]
			if self.array_json_notation:
				return path[:-1] + (f'{last}[{index}]',)
			return path + (f'{last}{index}',)

		if self.array_json_notation:
			return (f'[{index}]',)
		return (f'{self.prefix}{index}',)

	def _visit_map(self, accumulator, value, path):
		extra = self.extra_fields
		if extra.emit_type:
			self._emit(accumulator, path + (TYPE_KEY,), 'Map')

		count = 0
		for key, item in value.items():
			segment = self._map_segment(key)
			if segment == '':
				continue
			count += 1
			item_path = path + (segment,)
			if kind_of(item) is Kind.STRUCT:
				text = text_of(item)
				if text is not None:
					self._emit(accumulator, item_path, text)
				if not self.disable_type_prefix:
					item_path = item_path + (type_name(item),)
			self._visit(accumulator, item, item_path)

		if extra.emit_len:
			self._emit(accumulator, path + (LEN_KEY,), count)
		if extra.detailed_map and path:
			self._emit(accumulator, path, value)

	@staticmethod
	def _map_segment(key):
		if is_bytes_like(key):
			return bytes(key).decode('utf-8', errors='replace')
		return str(key)
