import unittest
from structdump.encoder import ExtraFields
from structdump.help import encoder_help, from_docstring


class TestHelp(unittest.TestCase):

    def test_empty_docstring(self):
        self.assertEqual(from_docstring(None), {"description": None, "args": []})

    def test_from_docstring(self):
        def documented(path, depth=0):
            """
            Walk a path.

            Args:
                path (str): where to go.
                depth (int): how far.
            """

        result = from_docstring(documented.__doc__)
        self.assertEqual(result["description"], "Walk a path.")
        self.assertEqual(
            [(arg["name"], arg["type"]) for arg in result["args"]],
            [("path", "str"), ("depth", "int")]
        )

    def test_encoder_help_lists_every_flag(self):
        result = encoder_help()
        self.assertEqual([arg["name"] for arg in result["extra_fields"]], list(ExtraFields.FLAGS))
        self.assertIn("prefix", [arg["name"] for arg in result["args"]])


if __name__ == "__main__":
    unittest.main()
