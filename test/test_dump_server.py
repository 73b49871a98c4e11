import unittest

from dump_server import MAX_BODY_SIZE, app


class TestDumpServer(unittest.TestCase):

    def setUp(self):
        app.config['TESTING'] = True
        self.client = app.test_client()

    def test_text_report(self):
        response = self.client.post('/dump', json={'user': {'name': 'bob', 'tags': ['a']}})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.mimetype, 'text/plain')
        self.assertEqual(response.get_data(as_text=True), 'user.name: bob\nuser.tags.tags0: a\n')

    def test_json_format_with_options(self):
        response = self.client.post(
            '/dump?format=json&separator=_&case=upper&emit_len=1&array_json_notation=true',
            json={'user': {'tags': ['a']}}
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {
            '__LEN__': '1',
            'USER___LEN__': '1',
            'USER_TAGS[0]': 'a',
            'USER_TAGS___LEN__': '1',
        })

    def test_deep_json(self):
        response = self.client.post('/dump?format=json&deep_json=yes', json={'key': '[1,2,3]'})
        self.assertEqual(response.get_json(), {'key.key0': '1', 'key.key1': '2', 'key.key2': '3'})

    def test_raw_body_dumped_as_text(self):
        response = self.client.post('/dump?prefix=raw', data=b'plain text', content_type='text/plain')
        self.assertEqual(response.get_data(as_text=True), 'raw: plain text\n')

    def test_unknown_option(self):
        response = self.client.post('/dump?colour=1', json={})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()['exception'], 'TypeError')

    def test_unknown_format(self):
        response = self.client.post('/dump?format=xml', json={})
        self.assertEqual(response.status_code, 400)

    def test_json_null_is_a_nil_root(self):
        response = self.client.post("/dump", data=b"null", content_type="application/json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_data(as_text=True), "")

        response = self.client.post("/dump?format=json", data=b"null", content_type="application/json")
        self.assertEqual(response.get_json(), {})

    def test_undecodable_json_body_dumped_as_text(self):
        response = self.client.post("/dump", data=b"{broken", content_type="application/json")
        self.assertEqual(response.get_data(as_text=True), ": {broken\n")

    def test_body_too_large(self):
        response = self.client.post('/dump', data=b'x' * (MAX_BODY_SIZE + 1))
        self.assertEqual(response.status_code, 413)

    def test_help(self):
        response = self.client.get('/help')

        self.assertEqual(response.status_code, 200)
        names = [arg['name'] for arg in response.get_json()['args']]
        self.assertIn('separator', names)
        self.assertIn('deep_json', [arg['name'] for arg in response.get_json()['extra_fields']])


if __name__ == "__main__":
    unittest.main()
