class DumpError(Exception):
	"""
	Raised (or carried by an ErrorResult) when a value could not be dumped.

	The fault that interrupted the traversal is available as __cause__.
	"""
	@classmethod
	def wrap(cls, value, cause):
		error = cls(f'can not dump {type(value).__name__}: {cause.__class__.__name__}: {cause}')
		error.__cause__ = cause
		return error
