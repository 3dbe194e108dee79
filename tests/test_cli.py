"""Unit tests for the urlcanon command line interface."""

import tempfile
import unittest
from pathlib import Path

from typer.testing import CliRunner

from urlcanon.cli import __version__, app


class TestCLI(unittest.TestCase):
    """Test CLI commands."""
    
    def setUp(self):
        self.runner = CliRunner()
    
    def test_canonicalise_arguments(self):
        result = self.runner.invoke(
            app, ["canonicalise", "https://example.com/foo/", "http://Example.com"]
        )
        
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(
            result.output.splitlines(),
            ["http://example.com/foo", "http://example.com/"],
        )
    
    def test_canonicalise_from_stdin(self):
        result = self.runner.invoke(
            app,
            ["canonicalise"],
            input="https://a.example.com/\n\nhttp://b.example.com/x/%2A\n",
        )
        
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(
            result.output.splitlines(),
            ["http://a.example.com/", "http://b.example.com/x/*"],
        )
    
    def test_canonicalise_escape_high_order(self):
        result = self.runner.invoke(
            app, ["canonicalise", "--escape-high-order", "http://example.com/café"]
        )
        
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.strip(), "http://example.com/caf%c3%a9")
    
    def test_canonicalise_keep_escapes(self):
        result = self.runner.invoke(
            app, ["canonicalise", "--keep-escapes", "http://example.com/%2A.html"]
        )
        
        self.assertEqual(result.output.strip(), "http://example.com/%2a.html")
    
    def test_canonicalise_with_disabled_config(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "settings.yaml"
            config_path.write_text("normalise_urls: false\n")
            
            result = self.runner.invoke(
                app,
                ["canonicalise", "--config", str(config_path), "HTTPS://Example.com/a/"],
            )
        
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.strip(), "HTTPS://Example.com/a/")
    
    def test_canonicalise_with_invalid_config(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "settings.yaml"
            config_path.write_text("normalise_urls: maybe\n")
            
            result = self.runner.invoke(
                app,
                ["canonicalise", "--config", str(config_path), "http://example.com/"],
            )
        
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Error", result.output)
    
    def test_fix(self):
        result = self.runner.invoke(app, ["fix", "http://example.com/wine 12% proof"])
        
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.strip(), "http://example.com/wine%2012%25%20proof")
    
    def test_resolve(self):
        result = self.runner.invoke(
            app, ["resolve", "https://example.com/a/b.html", "../c/"]
        )
        
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.strip(), "http://example.com/c")
    
    def test_resolve_no_normalise(self):
        result = self.runner.invoke(
            app, ["resolve", "--no-normalise", "https://example.com/a/b.html", "../c/"]
        )
        
        self.assertEqual(result.output.strip(), "https://example.com/c/")
    
    def test_resolve_invalid_reference(self):
        result = self.runner.invoke(app, ["resolve", "not a url", "/x"])
        
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Unable to resolve", result.output)
    
    def test_version(self):
        result = self.runner.invoke(app, ["version"])
        
        self.assertEqual(result.exit_code, 0)
        self.assertIn(__version__, result.output)


if __name__ == "__main__":
    unittest.main()
