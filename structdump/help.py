import docstring_parser

from structdump.encoder import Encoder, ExtraFields


def from_docstring(doc: str) -> dict:
	"""
	Parse a docstring to extract its general description and arguments using `docstring-parser`.

	Args:
		doc (str): The docstring to parse.

	Returns:
		dict: A JSON-compatible dictionary representation of the docstring.
	"""
	if not doc:
		return {"description": None, "args": []}

	parsed = docstring_parser.parse(doc)
	return {
		"description": parsed.short_description,
		"args": [
			{
				"name": param.arg_name,
				"type": param.type_name,
				"description": param.description,
			}
			for param in parsed.params
		],
	}


def encoder_help() -> dict:
	"""The documented encoder options, with the extra field flags listed under 'extra_fields'."""
	result = from_docstring(Encoder.__doc__)
	result["extra_fields"] = from_docstring(ExtraFields.__doc__)["args"]
	return result
