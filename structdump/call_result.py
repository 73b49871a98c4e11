import sys
import traceback
from abc import ABC, abstractmethod


# <<monad>>
class CallResult(ABC):
	"""
	Encapsulates the outcome of a dump operation, that either yielded a ValidResult or produced an ErrorResult.

	Dump operations never raise for faults found inside the dumped value: the caller decides with
	is_error() / get_result(default) whether a failure should become an exception.
	"""

	@staticmethod
	def of(value):
		"""
		Generic constructor for the monad:
		wraps 'value' in a ValidResult, except it already is an ErrorResult (returned unmodified)
		or an exception (converted into an ErrorResult). This allows for result chaining.
		"""
		if isinstance(value, CallResult):
			return value
		elif isinstance(value, Exception):
			return ErrorResult.from_exception(value)
		else:
			return ValidResult(value)

	@abstractmethod
	def then(self, func, *args, **kwargs):
		"""
		Applies the given function to the value if the result is valid, capturing exceptions as ErrorResults.
		Propagates the error otherwise.

		Args:
			func (Callable[[object, *args, **kwargs], object]): called with the real value as its first parameter.
			*args, **kwargs: additional callback parameter.
		"""
		pass

	@abstractmethod
	def on_error(self, func, *args, **kwargs):
		"""
		The logical negation of then(): the given function is called on ErrorResults only.

		Args:
			func (Callable[[ErrorResult, *args, **kwargs], object]): receives the ErrorResult as its first parameter.
			*args, **kwargs: additional callback parameter.
		"""
		pass

	@abstractmethod
	def get_result(self, default=None):
		pass

	@abstractmethod
	def is_error(self):
		pass

	def is_valid(self):
		return not self.is_error()


class ValidResult(CallResult):
	def __init__(self, value):
		self._value = value

	def is_error(self):
		return False

	def then(self, func, *args, **kwargs):
		try:
			return CallResult.of(func(self._value, *args, **kwargs))
		except MemoryError:
			raise
		except Exception as e:
			return ErrorResult.from_exception(e)

	def on_error(self, func, *args, **kwargs):
		return self

	def get_result(self, default=None):
		return self._value

	def __repr__(self):
		return f"ValidResult[{self._value.__class__.__name__}]"


class ErrorResult(CallResult):
	"""
	Represents a failed dump, holding the exception and the stack trace of the point of failure.
	"""
	def __init__(self, error_message=None, exception=None, stack_trace=None, prior_error=None):
		self.error_message = error_message
		self.exception = exception
		self.stack_trace = stack_trace
		self.prior_error = prior_error

	def is_error(self):
		return True

	def then(self, func, *args, **kwargs):
		return self

	def on_error(self, func, *args, **kwargs):
		try:
			return CallResult.of(func(self, *args, **kwargs))
		except Exception as e:
			return ErrorResult.from_exception(e, prior_error=self)

	@classmethod
	def from_exception(cls, exception, message=None, prior_error=None):
		"""
		Creates an ErrorResult from an exception. Called within an except-block, the stack trace of the
		exception being handled is captured.
		"""
		error_message = str(exception)
		if message is not None:
			error_message = f"{message}: {error_message}"
		stack_trace = traceback.format_exc().split('\n')
		return cls(error_message, exception, stack_trace, prior_error=prior_error)

	def get_error_message(self):
		return self.error_message

	def get_exception(self):
		return self.exception

	def get_stack_trace(self):
		return self.stack_trace

	def get_result(self, default=None):
		"""
		Returns the default value, as an ErrorResult has no valid value.

		Args:
			default (Any|Exception|type[ErrorResult]):
				- if default is an Exception, it is raised, chained to the stored exception
				- if default is the type ErrorResult, this ErrorResult instance is returned
				- in all other cases, 'default' is returned as a value
		"""
		if default is ErrorResult:
			return self

		if isinstance(default, Exception):
			if not default.args:
				default.args = (self.error_message,)
			raise default from self.exception

		return default

	def raise_error(self):
		"""Raises the stored exception, or a RuntimeError carrying the message if there is none."""
		if isinstance(self.exception, BaseException):
			raise self.exception
		raise RuntimeError(self.error_message)

	def dump(self, stream=None):
		if stream is None:
			stream = sys.stderr
		print(f"Error: {self.error_message}", file=stream)
		print("Stack Trace:", file=stream)
		print('\n'.join(self.stack_trace or []), file=stream)

	def as_json(self):
		return {
			'message': self.error_message,
			'exception': self.exception.__class__.__name__ if self.exception else None,
			'stacktrace': self.get_stack_trace()
		}

	def __repr__(self):
		return f"ErrorResult({self.error_message})"


def try_call(func, *args, **kwargs):
	"""
	Calls the function and returns a ValidResult or, capturing exceptions and stack traces, an ErrorResult.
	"""
	try:
		return ValidResult(func(*args, **kwargs))
	except MemoryError:
		raise
	except Exception as e:
		return ErrorResult.from_exception(e)
