"""Tests for layered config parsing and validation."""

import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from CloudSearchable.config import load_config, merge_config_dicts, parse_config_dict
from CloudSearchable.core.exceptions import ConfigurationError
from CloudSearchable.core.fields import FieldType

_ENV = {"AWS_ACCESS_KEY_ID": "AKID", "AWS_SECRET_ACCESS_KEY": "SECRET"}


def _base_raw_config() -> dict:
    return {
        "log": {"level": "info", "to_file": False, "dir": "log"},
        "aws": {"region": "us-east-1"},
        "domain": {
            "name": "products",
            "prefix": "dev-",
            "search_endpoint": "search.example.com",
            "fields": [
                {"name": "status", "type": "literal", "options": {"facet_enabled": True}},
                {"name": "price", "type": "int", "source": "cents"},
            ],
        },
        "query": {"fatal_warnings": True, "timeout": 5},
    }


class TestParseConfig(unittest.TestCase):
    def test_parse_success_nested_access(self) -> None:
        with patch.dict(os.environ, _ENV, clear=False):
            cfg = parse_config_dict(_base_raw_config())
        self.assertEqual(cfg.runtime.level, "INFO")
        self.assertEqual(cfg.aws.region, "us-east-1")
        self.assertEqual(cfg.domain.full_name, "dev-products")
        self.assertIsNone(cfg.domain.doc_endpoint)
        self.assertEqual(cfg.domain.api_version, "2013-01-01")
        self.assertTrue(cfg.query.fatal_warnings)
        self.assertEqual(cfg.query.timeout, 5.0)
        self.assertEqual([f.name for f in cfg.domain.fields], ["status", "price"])
        self.assertIs(cfg.domain.fields[1].type, FieldType.INT)
        self.assertTrue(cfg.domain.fields[0].facet_enabled)

    def test_credentials_from_environment(self) -> None:
        with patch.dict(os.environ, _ENV, clear=False):
            creds = parse_config_dict(_base_raw_config()).aws.credentials()
        self.assertEqual(creds.access_key, "AKID")
        self.assertNotIn("SECRET", repr(creds))

    def test_missing_credentials_error_names_variables(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            cfg = parse_config_dict(_base_raw_config())
            with self.assertRaisesRegex(ConfigurationError, "AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY"):
                cfg.aws.credentials()

    def test_log_and_query_sections_are_optional(self) -> None:
        raw = _base_raw_config()
        del raw["log"]
        del raw["query"]
        cfg = parse_config_dict(raw)
        self.assertEqual(cfg.runtime.level, "INFO")
        self.assertFalse(cfg.query.fatal_warnings)
        self.assertIsNone(cfg.query.timeout)

    def test_missing_region(self) -> None:
        raw = _base_raw_config()
        raw["aws"] = {}
        with self.assertRaisesRegex(ValueError, "aws\\.region"):
            parse_config_dict(raw)

    def test_wrong_type_error_contains_key(self) -> None:
        raw = _base_raw_config()
        raw["query"]["fatal_warnings"] = "yes"
        with self.assertRaisesRegex(TypeError, "query\\.fatal_warnings"):
            parse_config_dict(raw)

    def test_unknown_field_type(self) -> None:
        raw = _base_raw_config()
        raw["domain"]["fields"][0]["type"] = "uint"
        with self.assertRaisesRegex(ValueError, "domain\\.fields\\[0\\]\\.type"):
            parse_config_dict(raw)

    def test_duplicate_fields(self) -> None:
        raw = _base_raw_config()
        raw["domain"]["fields"].append({"name": "status", "type": "text"})
        with self.assertRaisesRegex(ValueError, "duplicate field: status"):
            parse_config_dict(raw)

    def test_invalid_log_level(self) -> None:
        raw = _base_raw_config()
        raw["log"]["level"] = "LOUD"
        with self.assertRaisesRegex(ValueError, "log\\.level"):
            parse_config_dict(raw)


class TestLoadConfig(unittest.TestCase):
    def test_merge_is_deep(self) -> None:
        merged = merge_config_dicts({"a": {"b": 1, "c": 2}, "d": 1}, {"a": {"c": 3}})
        self.assertEqual(merged, {"a": {"b": 1, "c": 3}, "d": 1})

    def test_override_file_merges_over_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            default_path = Path(tmp) / "default.yml"
            override_path = Path(tmp) / "override.yml"
            default_path.write_text(
                "aws:\n  region: us-east-1\ndomain:\n  name: products\n  prefix: dev-\n",
                encoding="utf-8",
            )
            override_path.write_text("domain:\n  prefix: prod-\n", encoding="utf-8")

            cfg = load_config(override_path, default_path=default_path)

        self.assertEqual(cfg.domain.full_name, "prod-products")
        self.assertEqual(cfg.aws.region, "us-east-1")

    def test_repository_default_config_parses(self) -> None:
        cfg = load_config(REPO_ROOT / "config" / "default.yml")
        self.assertEqual(cfg.domain.name, "products")
        self.assertIn("location", [f.name for f in cfg.domain.fields])


if __name__ == "__main__":
    unittest.main()
