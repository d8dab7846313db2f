"""Tests for the click command line."""

import json
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from CloudSearchable.cli.ui import cli

_CONFIG = """
log:
  level: INFO
  to_file: false
  dir: log
aws:
  region: us-east-1
domain:
  name: products
  search_endpoint: search.example.com
  fields:
    - {name: status, type: literal, options: {facet_enabled: true}}
    - {name: price, type: int}
"""

_ENV = {"AWS_ACCESS_KEY_ID": "AKID", "AWS_SECRET_ACCESS_KEY": "SECRET"}


class TestSearchCommand(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.config_path = Path(self._tmp.name) / "config.yml"
        self.config_path.write_text(_CONFIG, encoding="utf-8")
        self.runner = CliRunner()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _invoke(self, *args: str, env: dict | None = None):
        return self.runner.invoke(cli, ["--config", str(self.config_path), "search", *args], env=env or _ENV)

    def test_dry_run_prints_compiled_query(self) -> None:
        result = self._invoke("--text", "red shoes", "--where", "status=new", "--where", "price<=100", "--dry-run")

        self.assertEqual(result.exit_code, 0, result.output)
        params = json.loads(result.output.strip().splitlines()[-1])
        self.assertEqual(params["q"], "(or 'red' 'shoes')")
        self.assertEqual(params["fq"], "(and status:'new' price:..100)")
        self.assertEqual(params["facet.status"], {})

    def test_bad_where_option(self) -> None:
        result = self._invoke("--where", "status", "--dry-run")
        self.assertNotEqual(result.exit_code, 0)
        self.assertIn("FIELD<op>VALUE", result.output)

    def test_search_prints_hits_and_facets(self) -> None:
        api = MagicMock()
        api.search.return_value = {
            "hits": {"found": 1, "hit": [{"id": "abc", "fields": {"status": ["new"]}}]},
            "facets": {"status": {"buckets": [{"value": "new", "count": 1}]}},
        }
        with patch("CloudSearchable.services.CloudSearchApiClient", return_value=api):
            result = self._invoke("--where", "status=new", "--facet", "status")

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("found: 1", result.output)
        self.assertIn('"id": "abc"', result.output)
        self.assertIn("facet status: new=1", result.output)
        endpoint, params = api.search.call_args.args
        self.assertEqual(endpoint, "search.example.com")
        self.assertEqual(params["fq"], "status:'new'")

    def test_failure_aborts(self) -> None:
        result = self._invoke("--where", "unknown=1", env=_ENV)
        self.assertEqual(result.exit_code, 1)


if __name__ == "__main__":
    unittest.main()
