import unittest
from structdump.key_format import (
    case_formatter,
    default_formatter,
    default_lower_case_formatter,
    default_upper_case_formatter,
    format_key,
    format_segments,
    lower_case_formatter,
    upper_case_formatter,
)


class TestFormatters(unittest.TestCase):

    def test_default_is_identity(self):
        self.assertEqual(default_formatter()('MixedCase', 3), 'MixedCase')

    def test_case_formatters(self):
        self.assertEqual(lower_case_formatter()('MixedCase', 0), 'mixedcase')
        self.assertEqual(upper_case_formatter()('MixedCase', 0), 'MIXEDCASE')
        self.assertEqual(default_lower_case_formatter()('MixedCase', 0), 'mixedcase')
        self.assertEqual(default_upper_case_formatter()('MixedCase', 0), 'MIXEDCASE')

    def test_case_formatter_by_name(self):
        self.assertEqual(case_formatter('upper')('abc', 0), 'ABC')
        self.assertEqual(case_formatter('Lower')('ABC', 0), 'abc')
        self.assertEqual(case_formatter('default')('AbC', 0), 'AbC')
        with self.assertRaises(ValueError):
            case_formatter('camel')


class TestFormatKey(unittest.TestCase):

    def test_join_with_separator(self):
        self.assertEqual(format_key(['a', 'b']), 'a.b')
        self.assertEqual(format_key(['a', 'b'], separator='_'), 'a_b')

    def test_prefix(self):
        self.assertEqual(format_key(['a', 'b'], separator='_', prefix='P'), 'P_a_b')

    def test_empty_path(self):
        self.assertEqual(format_key([]), '')
        self.assertEqual(format_key([], prefix='P'), 'P')

    def test_formatters_applied_in_order_with_level(self):
        def numbered(segment, level):
            return f'{level}{segment}'

        self.assertEqual(format_key(['A', 'B'], [lower_case_formatter(), numbered]), '0a.1b')
        self.assertEqual(format_key(['A', 'B'], [numbered, lower_case_formatter()]), '0a.1b')
        self.assertEqual(format_key(['A', 'B'], [numbered, numbered]), '00A.11B')

    def test_segments_are_not_modified(self):
        path = ['User', 'Name']
        self.assertEqual(format_segments(path, [lower_case_formatter()]), ['user', 'name'])
        self.assertEqual(path, ['User', 'Name'])

    def test_no_formatters(self):
        self.assertEqual(format_segments(('A',), None), ['A'])


if __name__ == "__main__":
    unittest.main()
