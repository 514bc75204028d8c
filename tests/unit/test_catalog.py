"""Tests for the declarative endpoint catalog."""

import pytest

from jira_rest.catalog import EndpointSpec, load_catalog, python_name, snake_case
from jira_rest.catalog.loader import _parse_service
from jira_rest.clients.exceptions import CatalogError
from jira_rest.utils.params import placeholders


@pytest.fixture(scope="module")
def catalog():
    return load_catalog()


@pytest.mark.unit
class TestBundledCatalog:
    def test_covers_all_resource_groups(self, catalog) -> None:
        assert len(catalog) == 117
        assert sum(len(service.operations) for service in catalog.values()) == 731

    def test_core_groups_are_present(self, catalog) -> None:
        for name in ("issues", "issue_attachments", "issue_search", "projects", "sprint", "servicedesk"):
            assert name in catalog

    def test_every_placeholder_is_declared(self, catalog) -> None:
        for service in catalog.values():
            for name, endpoint in service.operations.items():
                assert sorted(placeholders(endpoint.path)) == sorted(endpoint.path_params), name

    def test_query_renames_are_normalized(self, catalog) -> None:
        endpoint = catalog["development_information"].operations["delete_by_properties"]

        assert endpoint.query == {"_updateSequenceId": "updateSequenceId"}

    def test_delete_without_response_body(self, catalog) -> None:
        endpoint = catalog["issue_attachments"].operations["remove_attachment"]

        assert endpoint.method == "DELETE"
        assert endpoint.response is False

    def test_uploads_declare_multipart_field(self, catalog) -> None:
        endpoint = catalog["issue_attachments"].operations["add_attachment"]

        assert endpoint.files == "file"
        assert endpoint.headers == {"X-Atlassian-Token": "no-check"}

    def test_load_is_cached(self, catalog) -> None:
        assert load_catalog() is catalog


@pytest.mark.unit
class TestNames:
    @pytest.mark.parametrize(
        ("wire", "expected"),
        [
            ("issueIdOrKey", "issue_id_or_key"),
            ("currentJQL", "current_jql"),
            ("_updateSequenceId", "_update_sequence_id"),
            ("id", "id"),
            ("maxResults", "max_results"),
        ],
    )
    def test_snake_case(self, wire: str, expected: str) -> None:
        assert snake_case(wire) == expected

    def test_keywords_get_trailing_underscore(self) -> None:
        assert python_name("from") == "from_"
        assert python_name("to") == "to"


@pytest.mark.unit
class TestEndpointSpec:
    def test_placeholder_mismatch_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="do not match placeholders"):
            EndpointSpec(method="GET", path="/rest/api/3/issue/{issueIdOrKey}")

    def test_one_payload_kind_only(self) -> None:
        with pytest.raises(ValueError, match="Only one payload kind"):
            EndpointSpec(method="POST", path="/x", body="a", files="file")

    def test_duplicate_arguments_are_rejected(self) -> None:
        with pytest.raises(ValueError, match="Duplicate argument"):
            EndpointSpec(method="GET", path="/x/{id}", path_params=["id"], query=["id"])

    def test_unknown_method_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            EndpointSpec(method="PATCH", path="/x")

    def test_argument_names_in_declaration_order(self) -> None:
        endpoint = EndpointSpec(
            method="POST",
            path="/x/{id}",
            path_params=["id"],
            query=["expand", {"_seq": "seq"}],
            body="payload",
            header_params={"Authorization": "authorization"},
        )

        assert endpoint.argument_names() == ["id", "expand", "seq", "payload", "authorization"]


@pytest.mark.unit
class TestParseService:
    def test_invalid_yaml(self) -> None:
        with pytest.raises(CatalogError, match="not valid YAML"):
            _parse_service("broken", "operations: [unclosed")

    def test_non_mapping(self) -> None:
        with pytest.raises(CatalogError, match="must contain a mapping"):
            _parse_service("broken", "- a\n- b\n")

    def test_invalid_operation(self) -> None:
        text = "operations:\n  bad:\n    method: GET\n    path: relative/path\n"

        with pytest.raises(CatalogError, match="is invalid"):
            _parse_service("broken", text)

    def test_valid_service(self) -> None:
        text = (
            'description: "Things."\n'
            "operations:\n"
            "  get_thing:\n"
            "    method: GET\n"
            '    path: "/rest/api/3/thing/{id}"\n'
            "    path_params: [id]\n"
        )

        service = _parse_service("things", text)

        assert service.name == "things"
        assert service.description == "Things."
        assert service.operations["get_thing"].path_params == ["id"]
