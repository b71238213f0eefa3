#!/usr/bin/env python3
"""
Unit tests for cli/formatters.py and cli/schemas.py
"""

import unittest
from io import StringIO

from capture_prep.cli.formatters import (
    console,
    format_size,
    print_crop_rectangle,
    print_error,
    print_info,
    print_processed_result,
    print_settings_table,
    print_specimens_table,
    print_warning
)
from capture_prep.cli.schemas import format_cli_response


class TestCliFormatters(unittest.TestCase):
    """Test cases for CLI formatters"""

    def setUp(self):
        """Redirect rich console output to StringIO"""
        self.console_output = StringIO()
        console.file = self.console_output

    def tearDown(self):
        """Restore console output"""
        console.file = None

    def test_print_error(self):
        print_error("Test error")
        output = self.console_output.getvalue()

        self.assertIn("Error", output)
        self.assertIn("Test error", output)

    def test_print_warning(self):
        print_warning("Test warning")
        output = self.console_output.getvalue()

        self.assertIn("Warning", output)
        self.assertIn("Test warning", output)

    def test_print_info(self):
        print_info("Test info")
        output = self.console_output.getvalue()

        self.assertIn("Info", output)
        self.assertIn("Test info", output)

    def test_print_processed_result(self):
        print_processed_result({
            "location": "/tmp/out/compressed_1.jpg",
            "base64": "QUJD",
            "compression_info": {
                "original_size": 2 * 1024 * 1024,
                "compressed_size": 512 * 1024,
                "compression_ratio": 75.0,
                "strategy": "medium",
                "quality": 0.8,
                "is_fallback": True,
            },
            "receipt_id": "R123456ABC",
            "has_watermark": False,
        })
        output = self.console_output.getvalue()

        self.assertIn("compressed_1.jpg", output)
        self.assertIn("2.00 MB", output)
        self.assertIn("75.0%", output)
        self.assertIn("fallback codec", output)
        self.assertIn("R123456ABC", output)
        self.assertIn("skipped", output)

    def test_print_processed_result_error(self):
        print_processed_result({"error": "Something broke"})
        self.assertIn("Something broke", self.console_output.getvalue())

    def test_print_crop_rectangle(self):
        print_crop_rectangle({"x": 1407, "y": 0, "width": 901, "height": 1980}, [3000, 2000], True)
        output = self.console_output.getvalue()

        self.assertIn("3000x2000", output)
        self.assertIn("1407", output)
        self.assertIn("yes", output)

    def test_print_settings_and_specimens(self):
        print_settings_table({"mode": "tiered", "max_width": 1920})
        print_specimens_table([{"location": "/tmp/r.jpg", "base64": "QUJD", "timestamp": 1}])
        output = self.console_output.getvalue()

        self.assertIn("tiered", output)
        self.assertIn("1920", output)
        self.assertIn("Stored Specimens (1)", output)

    def test_format_size(self):
        self.assertEqual(format_size(512 * 1024), "512.0 KB")
        self.assertEqual(format_size(3 * 1024 * 1024), "3.00 MB")


class TestCliSchemas(unittest.TestCase):
    """Test cases for the --json response envelope"""

    def test_success(self):
        self.assertEqual(format_cli_response(True, data={"x": 1}), {"success": True, "data": {"x": 1}})

    def test_error(self):
        self.assertEqual(format_cli_response(False, error="bad"), {"success": False, "error": "bad"})
        response = format_cli_response(False, error="bad", details={"quality": "too high"})
        self.assertEqual(response["details"], {"quality": "too high"})


if __name__ == "__main__":
    unittest.main()
