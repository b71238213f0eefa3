#!/usr/bin/env python3
"""
Unit tests for mcp/wrappers.py
"""

import unittest
from unittest.mock import patch

from capture_prep.core.errors import CompressionError, ProbeError
from capture_prep.core.models import CompressionSettings, ImageHandle, ProcessedImage, WatermarkResult
from capture_prep.mcp.wrappers import (
    format_mcp_response,
    crop_rectangle_wrapper,
    process_ocr_wrapper,
    process_receipt_wrapper,
    process_submission_wrapper,
    settings_wrapper,
    watermark_wrapper
)


class TestMcpWrappers(unittest.TestCase):
    """Test cases for MCP wrappers"""

    def test_format_mcp_response(self):
        success_response = format_mcp_response(True, data={"result": "test"})
        self.assertTrue(success_response["success"])
        self.assertEqual(success_response["result"], "test")

        error_response = format_mcp_response(False, error="Test error")
        self.assertFalse(error_response["success"])
        self.assertEqual(error_response["error"], "Test error")

    def test_crop_rectangle_wrapper(self):
        result = crop_rectangle_wrapper(3000, 2000, 400, 800)
        self.assertTrue(result["success"])
        self.assertEqual(
            (result["x"], result["y"], result["width"], result["height"]), (1407, 0, 901, 1980)
        )
        self.assertTrue(result["orientation_mismatch"])

    def test_crop_rectangle_wrapper_invalid(self):
        result = crop_rectangle_wrapper(0, 2000, 400, 800)
        self.assertFalse(result["success"])
        self.assertIn("positive", result["error"])

    @patch('capture_prep.mcp.wrappers.SettingsStore')
    @patch('capture_prep.mcp.wrappers.ImageTransformPipeline')
    def test_process_submission_wrapper(self, mock_pipeline_cls, mock_store_cls):
        mock_store_cls.return_value.load.return_value = CompressionSettings()
        pipeline = mock_pipeline_cls.return_value
        pipeline.build_submission_payload.return_value = ProcessedImage(
            location="/tmp/compressed.jpg", base64="QUJD", compression_info={"compression_ratio": 80.0}
        )

        result = process_submission_wrapper("/tmp/photo.jpg", quality=0.5)

        self.assertTrue(result["success"])
        self.assertEqual(result["base64"], "QUJD")
        self.assertNotIn("receipt_id", result)
        overrides = pipeline.build_submission_payload.call_args[0][2]
        self.assertEqual(overrides["quality"], 0.5)
        self.assertIsNone(overrides["max_width"])

    @patch('capture_prep.mcp.wrappers.SettingsStore')
    @patch('capture_prep.mcp.wrappers.ImageTransformPipeline')
    def test_process_submission_wrapper_error(self, mock_pipeline_cls, mock_store_cls):
        mock_store_cls.return_value.load.return_value = CompressionSettings()
        mock_pipeline_cls.return_value.build_submission_payload.side_effect = CompressionError(
            "Image compression failed: encoder unavailable"
        )

        result = process_submission_wrapper("/tmp/photo.jpg")

        self.assertFalse(result["success"])
        self.assertEqual(result["error"], "Image compression failed: encoder unavailable")

    @patch('capture_prep.mcp.wrappers.ImageTransformPipeline')
    def test_process_ocr_wrapper_probe_error(self, mock_pipeline_cls):
        mock_pipeline_cls.return_value.open_handle.side_effect = ProbeError("Failed to get image size")

        result = process_ocr_wrapper("/tmp/missing.jpg", 400, 800)

        self.assertFalse(result["success"])
        self.assertIn("Failed to get image size", result["error"])

    @patch('capture_prep.mcp.wrappers.ImageTransformPipeline')
    def test_process_ocr_wrapper_unexpected_error(self, mock_pipeline_cls):
        mock_pipeline_cls.return_value.open_handle.side_effect = RuntimeError("boom")

        result = process_ocr_wrapper("/tmp/photo.jpg", 400, 800)

        self.assertFalse(result["success"])
        self.assertEqual(result["error"], "OCR processing failed: boom")

    @patch('capture_prep.mcp.wrappers.ImageTransformPipeline')
    def test_unexpected_error_with_braces(self, mock_pipeline_cls):
        """Messages containing format braces still produce an error response"""
        mock_pipeline_cls.return_value.open_handle.side_effect = RuntimeError("bad payload {'width': 3}")

        result = process_ocr_wrapper("/tmp/photo.jpg", 400, 800)

        self.assertFalse(result["success"])
        self.assertEqual(result["error"], "OCR processing failed: bad payload {'width': 3}")

    @patch('capture_prep.mcp.wrappers.SettingsStore')
    @patch('capture_prep.mcp.wrappers.ImageTransformPipeline')
    def test_submission_unexpected_error_with_braces(self, mock_pipeline_cls, mock_store_cls):
        mock_store_cls.return_value.load.return_value = CompressionSettings()
        mock_pipeline_cls.return_value.build_submission_payload.side_effect = KeyError("{quality}")

        result = process_submission_wrapper("/tmp/photo.jpg")

        self.assertFalse(result["success"])
        self.assertIn("{quality}", result["error"])

    @patch('capture_prep.mcp.wrappers.SettingsStore')
    @patch('capture_prep.mcp.wrappers.ImageTransformPipeline')
    def test_process_receipt_wrapper(self, mock_pipeline_cls, mock_store_cls):
        mock_store_cls.return_value.load.return_value = CompressionSettings()
        mock_pipeline_cls.return_value.build_receipt_payload.return_value = ProcessedImage(
            location="/tmp/photo.jpg", base64="QUJD", receipt_id="R123456ABC", has_watermark=False
        )

        result = process_receipt_wrapper("/tmp/photo.jpg")

        self.assertTrue(result["success"])
        self.assertEqual(result["receipt_id"], "R123456ABC")
        self.assertFalse(result["has_watermark"])

    @patch('capture_prep.mcp.wrappers._composer')
    @patch('capture_prep.mcp.wrappers.ImageTransformPipeline')
    def test_watermark_wrapper(self, mock_pipeline_cls, mock_composer):
        source = ImageHandle(location="/tmp/photo.jpg", width=1600, height=1200)
        mock_pipeline_cls.return_value.open_handle.return_value = source
        mock_composer.return_value.compose.return_value = WatermarkResult(
            handle=ImageHandle(location="/tmp/watermarked.jpg", width=800, height=600),
            has_watermark=True,
            label_text="HELLO",
        )

        result = watermark_wrapper("/tmp/photo.jpg", label="HELLO")

        self.assertTrue(result["success"])
        self.assertEqual(result["location"], "/tmp/watermarked.jpg")
        mock_composer.return_value.compose.assert_called_once_with(source, "HELLO")

    @patch('capture_prep.mcp.wrappers.SettingsStore')
    def test_settings_wrapper(self, mock_store_cls):
        mock_store_cls.return_value.load.return_value = CompressionSettings(mode="fixed")

        result = settings_wrapper()

        self.assertTrue(result["success"])
        self.assertEqual(result["settings"]["mode"], "fixed")


class TestMcpServer(unittest.TestCase):
    """Test cases for MCP server helpers"""

    def test_server_info_lists_tools(self):
        from capture_prep.mcp.mcp_server import get_server_info

        info = get_server_info()
        self.assertIn("process_submission_image", info["tools"])
        self.assertEqual(info["version"], "1.0.0")

    def test_health_check(self):
        from capture_prep.mcp.mcp_server import health_check

        self.assertEqual(health_check()["status"], "healthy")

    def test_create_mcp_server(self):
        from capture_prep.mcp.mcp_tools import create_mcp_server

        self.assertIsNotNone(create_mcp_server("Test MCP Server"))


if __name__ == "__main__":
    unittest.main()
