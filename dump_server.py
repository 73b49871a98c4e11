import logging

from flask import Flask, request, jsonify, Response

from structdump.call_result import ErrorResult, try_call
from structdump.encoder import Encoder
from structdump.help import encoder_help

logger = logging.getLogger(__name__)

MAX_BODY_SIZE = 1_000_000

app = Flask(__name__)


def _error_reply(result: ErrorResult, status=400):
	return jsonify(result.as_json()), status


@app.route('/help', methods=['GET'])
def show_help():
	return jsonify(encoder_help())


@app.route('/dump', methods=['POST'])
def dump():
	"""
	Dump the request body. JSON bodies are dumped structurally, any other body as text.
	Query parameters configure the encoder, except 'format': 'text' (default) or 'json'.
	"""
	content_length = request.content_length
	if content_length and content_length > MAX_BODY_SIZE:
		return jsonify({"error": "Request body exceeds maximum allowed size."}), 413

	parameters = {key: value for key, value in request.args.items()}
	output_format = parameters.pop('format', 'text')
	if output_format not in ('text', 'json'):
		return jsonify({"error": f"unknown format: {output_format}"}), 400

	encoder_result = try_call(Encoder.from_options, parameters)
	if encoder_result.is_error():
		return _error_reply(encoder_result)
	encoder: Encoder = encoder_result.get_result()

	body = request.get_data()
	if request.is_json:
		parsed = request.get_json(silent=True)
		# a JSON null body is a nil root, an undecodable one is dumped as text
		if parsed is not None or body.strip() == b'null':
			body = parsed

	if output_format == 'json':
		result = encoder.to_string_map(body)
		if result.is_error():
			return _error_reply(result)
		return jsonify(result.get_result())

	result = encoder.sdump(body)
	if result.is_error():
		return _error_reply(result)
	return Response(result.get_result(), mimetype='text/plain')


if __name__ == '__main__':
	def main():
		logging.basicConfig(level=logging.INFO)
		logger.info('serving dumps on port 5001')
		app.run('0.0.0.0', 5001)

	main()
