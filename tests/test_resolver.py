"""Tests for identifier resolution."""

import pytest

from gitscrum_mcp.core.exceptions import IdentifierNotFoundError
from gitscrum_mcp.core.resolver import (
    find_project_by_name,
    normalize_color,
    normalize_workflow_status,
    parse_project_route,
    resolve_label_ids,
    resolve_label_like_id,
    resolve_project_context,
)
from gitscrum_mcp.services.search_service import SearchService


def search_results(*items):
    return {"data": {"projects": {"items": list(items)}}}


class TestParseProjectRoute:
    def test_valid(self):
        context = parse_project_route("/acme/projects/api-v2")

        assert context.company_slug == "acme"
        assert context.project_slug == "api-v2"

    @pytest.mark.parametrize(
        "route",
        [
            None,
            "",
            "acme/projects/api-v2",
            "/acme/boards/api-v2",
            "/acme/projects/api-v2/tasks",
            "/acme/projects/",
        ],
    )
    def test_malformed(self, route):
        assert parse_project_route(route) is None


class TestResolveProjectContext:
    @pytest.mark.asyncio
    async def test_both_slugs_no_network(self, make_client, api):
        async with make_client() as client:
            context = await resolve_project_context(
                SearchService(client), company_slug="acme", project_slug="api-v2"
            )

        assert context.company_slug == "acme"
        assert context.project_slug == "api-v2"
        assert api.requests == []

    @pytest.mark.asyncio
    async def test_project_slug_only(self, make_client, api):
        """The company comes from the route of the matching search result."""
        api.add(
            "GET",
            "/search",
            search_results({"title": "API v2", "route": "/acme/projects/api-v2"}),
        )

        async with make_client() as client:
            context = await resolve_project_context(
                SearchService(client), project_slug="api-v2"
            )

        assert context.company_slug == "acme"
        assert context.project_slug == "api-v2"
        params = api.requests[0].url.params
        assert params["q"] == "api-v2"
        assert params["categories"] == "projects"
        assert params["limit"] == "5"

    @pytest.mark.asyncio
    async def test_exact_title_preferred(self, make_client, api):
        api.add(
            "GET",
            "/search",
            search_results(
                {"title": "Mobile App v2", "route": "/acme/projects/mobile-app-v2"},
                {"title": "mobile app", "route": "/acme/projects/mobile-app"},
            ),
        )

        async with make_client() as client:
            context = await resolve_project_context(
                SearchService(client), project_name="Mobile App"
            )

        assert context.project_slug == "mobile-app"

    @pytest.mark.asyncio
    async def test_malformed_route(self, make_client, api):
        api.add("GET", "/search", search_results({"title": "X", "route": "/x/y"}))

        async with make_client() as client:
            context = await resolve_project_context(
                SearchService(client), project_slug="x"
            )

        assert context is None

    @pytest.mark.asyncio
    async def test_no_results(self, make_client, api):
        api.add("GET", "/search", {"data": {}})

        async with make_client() as client:
            assert await resolve_project_context(SearchService(client), project_slug="x") is None

    @pytest.mark.asyncio
    async def test_company_only(self, make_client, api):
        async with make_client() as client:
            assert await resolve_project_context(SearchService(client), company_slug="acme") is None

        assert api.requests == []

    @pytest.mark.asyncio
    async def test_search_scoped_to_company(self, make_client, api):
        api.add(
            "GET",
            "/search",
            search_results({"title": "Web", "route": "/acme/projects/web"}),
        )

        async with make_client() as client:
            await resolve_project_context(
                SearchService(client), company_slug="acme", project_name="Web"
            )

        assert api.requests[0].url.params["company_slug"] == "acme"


class TestFindProjectByName:
    @pytest.mark.asyncio
    async def test_found(self, make_client, api):
        api.add(
            "GET",
            "/search",
            search_results({"title": "Website", "route": "/acme/projects/website"}),
        )

        async with make_client() as client:
            match = await find_project_by_name(SearchService(client), "website")

        assert match.name == "Website"
        assert match.project_slug == "website"
        assert match.workspace_slug == "acme"

    @pytest.mark.asyncio
    async def test_not_found(self, make_client, api):
        api.add("GET", "/search", search_results())

        async with make_client() as client:
            assert await find_project_by_name(SearchService(client), "nothing") is None

    @pytest.mark.asyncio
    async def test_workspace_slug_from_caller(self, make_client, api):
        """A company slug passed by the caller is reported as the workspace."""
        api.add(
            "GET",
            "/search",
            search_results({"title": "Web", "route": "/acme/projects/web"}),
        )

        async with make_client() as client:
            match = await find_project_by_name(SearchService(client), "web", company_slug="acme-eu")

        assert match.company_slug == "acme"
        assert match.workspace_slug == "acme-eu"


class TestLabelLikeIds:
    def test_case_insensitive_match(self):
        assert resolve_label_like_id("in progress", [{"id": 20, "title": "In Progress"}]) == 20

    def test_first_match_wins(self):
        candidates = [{"id": 1, "title": "Done"}, {"id": 2, "title": "done"}]

        assert resolve_label_like_id("DONE", candidates) == 1

    def test_not_found(self):
        candidates = [{"id": 1, "title": "Todo"}]

        with pytest.raises(IdentifierNotFoundError) as exc_info:
            resolve_label_like_id("Review", candidates)

        assert exc_info.value.to_payload("column") == {
            "error": "column_not_found",
            "column": "Review",
            "available": candidates,
        }

    def test_csv_skips_unknown(self):
        labels = [{"id": 1, "title": "Bug"}, {"id": 3, "title": "UI"}]

        assert resolve_label_ids("bug, missing ,ui", labels) == [1, 3]


class TestNormalizeColor:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("blue", "58A6FF"),
            ("Red", "F85149"),
            ("#lime", "56D364"),
            ("#ff5733", "FF5733"),
            ("abc123", "ABC123"),
            ("chartreuse", "CHARTREUSE"),
        ],
    )
    def test_values(self, value, expected):
        assert normalize_color(value) == expected


class TestNormalizeWorkflowStatus:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("todo", 0),
            ("Backlog", 0),
            ("done", 1),
            ("Closed", 1),
            ("in progress", 2),
            ("doing", 2),
            (2, 2),
            (7, 0),
            (-1, 0),
            ("unknown", 0),
        ],
    )
    def test_values(self, value, expected):
        assert normalize_workflow_status(value) == expected
