"""Tests for the domain handle: schema, documents, endpoints, provisioning."""

import sys
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import Mock, patch

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from CloudSearchable.core.exceptions import ConfigurationError, DomainNotFoundError
from CloudSearchable.domain import Domain
from CloudSearchable.query.chain import QueryChain


def _status(**overrides) -> dict:
    status = {
        "DomainName": "dev-products",
        "Processing": False,
        "RequiresIndexDocuments": False,
        "SearchService": {"Endpoint": "search-dev-products.example.com"},
        "DocService": {"Endpoint": "doc-dev-products.example.com"},
    }
    status.update(overrides)
    return status


def _domain(**kwargs) -> Domain:
    kwargs.setdefault("api_client", Mock())
    domain = Domain("products", domain_prefix="dev-", **kwargs)
    domain.add_field("title", "text", return_enabled=True)
    domain.add_field("price", "int", source=lambda r: r.cents // 100)
    domain.add_field("status", "literal", source="state", facet_enabled=True)
    return domain


class TestSchema(unittest.TestCase):
    def test_prefixed_name(self) -> None:
        self.assertEqual(_domain().name, "dev-products")

    def test_duplicate_field(self) -> None:
        domain = _domain()
        with self.assertRaisesRegex(ValueError, "already exists"):
            domain.add_field("title", "literal")

    def test_query_starts_a_chain(self) -> None:
        domain = _domain(fatal_warnings=True)
        chain = domain.query()
        self.assertIsInstance(chain, QueryChain)
        self.assertTrue(chain.fatal_warnings)
        self.assertFalse(domain.query(fatal_warnings=False).fatal_warnings)


class TestDocuments(unittest.TestCase):
    def test_document_id_is_md5_of_record_id(self) -> None:
        self.assertEqual(Domain.document_id(1), "c4ca4238a0b923820dcc509a6f75849b")

    def test_addition_sdf(self) -> None:
        record = SimpleNamespace(title="Shoes", cents=1999, state=None)
        sdf = _domain().addition_sdf(record, 1)
        self.assertEqual(
            sdf,
            {
                "type": "add",
                "id": "c4ca4238a0b923820dcc509a6f75849b",
                "lang": "en",
                "fields": {"title": "Shoes", "price": 19},
            },
        )

    def test_deletion_sdf(self) -> None:
        self.assertEqual(_domain().deletion_sdf(1), {"type": "delete", "id": "c4ca4238a0b923820dcc509a6f75849b"})

    def test_post_and_delete_record(self) -> None:
        api = Mock()
        api.post_documents.return_value = {"status": "success"}
        domain = _domain(api_client=api, doc_endpoint="doc.example.com")
        record = SimpleNamespace(title="Shoes", cents=100, state="new")

        self.assertEqual(domain.post_record(record, 7), {"status": "success"})
        endpoint, sdf_list = api.post_documents.call_args.args
        self.assertEqual(endpoint, "doc.example.com")
        self.assertEqual(sdf_list[0]["fields"], {"title": "Shoes", "price": 1, "status": "new"})

        domain.delete_record(7)
        _, sdf_list = api.post_documents.call_args.args
        self.assertEqual(sdf_list, [{"type": "delete", "id": Domain.document_id(7)}])

    def test_post_records_batches(self) -> None:
        api = Mock()
        domain = _domain(api_client=api, doc_endpoint="doc.example.com")
        records = [(SimpleNamespace(title=f"t{i}", cents=0, state="new"), i) for i in range(3)]
        domain.post_records(records)
        self.assertEqual(api.post_documents.call_count, 1)
        self.assertEqual(len(api.post_documents.call_args.args[1]), 3)


class TestEndpoints(unittest.TestCase):
    def test_execute_query_uses_search_endpoint(self) -> None:
        api = Mock()
        api.search.return_value = {"hits": {"found": 0, "hit": []}}
        domain = _domain(api_client=api, search_endpoint="search.example.com", api_version="2013-01-01")

        domain.execute_query({"q": "matchall"})

        api.search.assert_called_once_with("search.example.com", {"q": "matchall"}, api_version="2013-01-01")

    def test_endpoints_are_looked_up_once(self) -> None:
        control = Mock()
        control.describe_domains.return_value = {"DomainStatusList": [_status()]}
        domain = _domain(control_client=control)

        self.assertEqual(domain.search_endpoint, "search-dev-products.example.com")
        self.assertEqual(domain.doc_endpoint, "doc-dev-products.example.com")
        control.describe_domains.assert_called_once_with(DomainNames=["dev-products"])

    def test_unknown_domain(self) -> None:
        control = Mock()
        control.describe_domains.return_value = {"DomainStatusList": []}
        with self.assertRaises(DomainNotFoundError):
            _ = _domain(control_client=control).search_endpoint

    def test_no_endpoint_and_no_control_client(self) -> None:
        with self.assertRaises(ConfigurationError):
            _ = _domain().search_endpoint


class TestProvisioning(unittest.TestCase):
    def test_create_defines_every_field(self) -> None:
        control = Mock()
        domain = _domain(control_client=control)

        domain.create()

        control.create_domain.assert_called_once_with(DomainName="dev-products")
        self.assertEqual(control.define_index_field.call_count, 3)
        first = control.define_index_field.call_args_list[0].kwargs
        self.assertEqual(first["IndexField"]["IndexFieldName"], "title")
        self.assertEqual(first["IndexField"]["TextOptions"], {"ReturnEnabled": True})

    def test_provisioning_requires_control_client(self) -> None:
        with self.assertRaises(ConfigurationError):
            _domain().reindex()

    def test_apply_changes_reindexes_and_waits(self) -> None:
        control = Mock()
        control.describe_domains.side_effect = [
            {"DomainStatusList": [_status(RequiresIndexDocuments=True, Processing=True)]},
            {"DomainStatusList": [_status(Processing=True)]},
            {"DomainStatusList": [_status(Processing=False)]},
        ]
        domain = _domain(control_client=control)

        with patch("CloudSearchable.domain.time") as mock_time:
            mock_time.monotonic.side_effect = [0.0, 0.0, 1.0]
            self.assertTrue(domain.apply_changes(timeout=10))

        control.index_documents.assert_called_once_with(DomainName="dev-products")
        mock_time.sleep.assert_called_once_with(1.0)

    def test_apply_changes_backoff_is_capped_by_window(self) -> None:
        control = Mock()
        control.describe_domains.return_value = {"DomainStatusList": [_status(Processing=True)]}
        domain = _domain(control_client=control)

        with patch("CloudSearchable.domain.time") as mock_time:
            mock_time.monotonic.side_effect = [0.0, 0.0, 1.0, 3.0]
            self.assertFalse(domain.apply_changes(timeout=3))

        self.assertEqual([c.args[0] for c in mock_time.sleep.call_args_list], [1.0, 2.0])
        control.index_documents.assert_not_called()
        self.assertEqual(control.describe_domains.call_count, 4)

    def test_apply_changes_without_wait(self) -> None:
        control = Mock()
        control.describe_domains.return_value = {"DomainStatusList": [_status(Processing=True)]}
        domain = _domain(control_client=control)

        with patch("CloudSearchable.domain.time") as mock_time:
            mock_time.monotonic.side_effect = [0.0, 0.0]
            self.assertFalse(domain.apply_changes())

        mock_time.sleep.assert_not_called()


if __name__ == "__main__":
    unittest.main()
