"""
Module level shortcuts, each building an Encoder with default options.

The optional *formatters replace the default key formatter, i.e.:

	sdump(config, default_lower_case_formatter()).get_result()
"""
import sys

from structdump.encoder import Encoder


def _encoder(writer, formatters):
	encoder = Encoder(writer)
	if formatters:
		encoder.formatters = list(formatters)
	return encoder


def dump(value, *formatters):
	"""Write the sorted report of value to stdout."""
	return fdump(sys.stdout, value, *formatters)


def fdump(writer, value, *formatters):
	return _encoder(writer, formatters).fdump(value)


def sdump(value, *formatters):
	return _encoder(None, formatters).sdump(value)


def must_sdump(value, *formatters):
	"""
	Like sdump(), but returns the report itself.

	Raises:
		DumpError: if the value could not be dumped.
	"""
	result = sdump(value, *formatters)
	if result.is_error():
		result.raise_error()
	return result.get_result()


def to_map(value, *formatters):
	return _encoder(None, formatters).to_map(value)


def to_string_map(value, *formatters):
	return _encoder(None, formatters).to_string_map(value)
