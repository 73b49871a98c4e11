from typing import Callable, Iterable, Sequence


# formatter(segment, level) -> formatted segment; level is the segment's position within the path
KeyFormatter = Callable[[str, int], str]


def default_formatter() -> KeyFormatter:
	def _format(segment, level):
		return segment

	return _format


def lower_case_formatter() -> KeyFormatter:
	def _format(segment, level):
		return segment.lower()

	return _format


def upper_case_formatter() -> KeyFormatter:
	def _format(segment, level):
		return segment.upper()

	return _format


def default_lower_case_formatter() -> KeyFormatter:
	default = default_formatter()

	def _format(segment, level):
		return default(segment, level).lower()

	return _format


def default_upper_case_formatter() -> KeyFormatter:
	default = default_formatter()

	def _format(segment, level):
		return default(segment, level).upper()

	return _format


FORMATTERS = {
	'default': default_formatter,
	'lower': default_lower_case_formatter,
	'upper': default_upper_case_formatter,
}


def case_formatter(name: str) -> KeyFormatter:
	"""
	Look up a formatter by name ('default', 'lower' or 'upper').

	Raises:
		ValueError: on unknown names.
	"""
	factory = FORMATTERS.get(name.lower())
	if factory is None:
		raise ValueError(f"unknown key case '{name}', expected one of: {', '.join(FORMATTERS)}")
	return factory()


def format_segments(path: Sequence[str], formatters: Iterable[KeyFormatter]) -> list:
	"""
	Pass every segment of path through the formatters, in order. The path itself is left untouched.
	"""
	formatters = list(formatters or [])
	result = []
	for level, segment in enumerate(path):
		for formatter in formatters:
			segment = formatter(segment, level)
		result.append(segment)
	return result


def format_key(path: Sequence[str], formatters: Iterable[KeyFormatter] = None, separator='.', prefix='') -> str:
	"""
	Render a path as an accumulator key.

	Args:
		path (Sequence[str]): the segments from the dumped root to the current value.
		formatters (Iterable[KeyFormatter]): applied to every segment, in order.
		separator (str): joins the formatted segments.
		prefix (str): if not empty, prepended followed by the separator. An empty path renders as the bare prefix.

	Example:
		format_key(['User', 'Name'], [lower_case_formatter()], '_', 'APP') -> 'APP_user_name'
	"""
	key = separator.join(format_segments(path, formatters))
	if not prefix:
		return key
	if not key:
		return prefix
	return f'{prefix}{separator}{key}'
