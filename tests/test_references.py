import re
import unittest

from eventbook.bookings.references import ReferenceGenerator


class ReferenceGeneratorTests(unittest.TestCase):
    def setUp(self):
        self.generator = ReferenceGenerator()

    def test_reference_format(self):
        self.assertRegex(self.generator.new_reference(), r"^BK\d{13,}[A-Z0-9]{5}$")

    def test_qr_token_format(self):
        self.assertRegex(self.generator.new_qr_token(), r"^QR\d{13,}[A-Z0-9]{9}$")

    def test_values_are_practically_unique(self):
        references = {self.generator.new_reference() for _ in range(500)}
        tokens = {self.generator.new_qr_token() for _ in range(500)}
        self.assertEqual(len(references), 500)
        self.assertEqual(len(tokens), 500)

    def test_timestamp_prefix_does_not_decrease(self):
        first = int(re.match(r"BK(\d+)", self.generator.new_reference()).group(1)[:13])
        second = int(re.match(r"BK(\d+)", self.generator.new_reference()).group(1)[:13])
        self.assertGreaterEqual(second, first)


if __name__ == "__main__":
    unittest.main()
