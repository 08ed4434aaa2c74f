"""Resolution of human readable identifiers into the slugs and ids the API needs."""

import logging
import re
from typing import TYPE_CHECKING, Any, Optional, Union

from gitscrum_mcp.core.exceptions import IdentifierNotFoundError
from gitscrum_mcp.models.context import ProjectMatch, ResolvedContext

if TYPE_CHECKING:
    from gitscrum_mcp.services.search_service import SearchService

logger = logging.getLogger(__name__)

PROJECT_ROUTE_PATTERN = re.compile(r"^/([^/]+)/projects/([^/]+)$")

COLOR_MAP = {
    "gray": "8B949E",
    "blue": "58A6FF",
    "red": "F85149",
    "green": "3FB950",
    "yellow": "D29922",
    "purple": "A371F7",
    "coral": "FF7B72",
    "amber": "F2CC60",
    "sky": "79C0FF",
    "lime": "56D364",
}

WORKFLOW_STATUS_MAP = {
    "todo": 0,
    "to do": 0,
    "open": 0,
    "backlog": 0,
    "done": 1,
    "complete": 1,
    "completed": 1,
    "closed": 1,
    "in progress": 2,
    "in-progress": 2,
    "inprogress": 2,
    "doing": 2,
    "active": 2,
}


def parse_project_route(route: Optional[str]) -> Optional[ResolvedContext]:
    """
    Parse a project route of the form /{company_slug}/projects/{project_slug}.

    Returns:
        The slugs, or None when the route has any other shape
    """
    if not route:
        return None
    match = PROJECT_ROUTE_PATTERN.match(route)
    if not match:
        return None
    return ResolvedContext(company_slug=match.group(1), project_slug=match.group(2))


async def _search_projects(
    search_service: "SearchService",
    query: str,
    company_slug: Optional[str] = None,
) -> list[dict[str, Any]]:
    results = await search_service.search(
        query,
        categories="projects",
        limit=5,
        company_slug=company_slug,
    )
    projects = (results or {}).get("projects") or {}
    return projects.get("items") or []


def _best_match(items: list[dict[str, Any]], query: str) -> dict[str, Any]:
    """First exact case-insensitive title match, else the first item."""
    wanted = query.lower()
    for item in items:
        if str(item.get("title", "")).lower() == wanted:
            return item
    return items[0]


async def resolve_project_context(
    search_service: "SearchService",
    company_slug: Optional[str] = None,
    project_slug: Optional[str] = None,
    project_name: Optional[str] = None,
) -> Optional[ResolvedContext]:
    """
    Resolve company and project slugs from whatever the caller supplied.

    When both slugs are given they are returned as-is without a network call.
    Otherwise the project slug or name is looked up through global search.

    Args:
        search_service: Search service used for the lookup
        company_slug: Workspace slug, narrows the search when given
        project_slug: Project slug
        project_name: Project name, used when no slug is given

    Returns:
        Resolved slugs, or None when nothing matched
    """
    if company_slug and project_slug:
        return ResolvedContext(company_slug=company_slug, project_slug=project_slug)

    identifier = project_slug or project_name
    if not identifier:
        return None

    items = await _search_projects(search_service, identifier, company_slug)
    if not items:
        logger.debug(f"No project matches '{identifier}'")
        return None

    return parse_project_route(_best_match(items, identifier).get("route"))


async def find_project_by_name(
    search_service: "SearchService",
    name: str,
    company_slug: Optional[str] = None,
) -> Optional[ProjectMatch]:
    """
    Find a project by name across all accessible workspaces.

    Returns:
        Project slugs and display names, or None when not found
    """
    items = await _search_projects(search_service, name, company_slug)
    if not items:
        return None

    item = _best_match(items, name)
    context = parse_project_route(item.get("route"))
    if context is None:
        return None

    return ProjectMatch(
        project_slug=context.project_slug,
        company_slug=context.company_slug,
        name=item.get("title", ""),
        workspace_slug=company_slug or context.company_slug,
    )


def resolve_label_like_id(
    title: str,
    candidates: list[dict[str, Any]],
    field: str = "title",
) -> Any:
    """
    Map a title to the id of the matching candidate (workflows, types, efforts, labels).

    Raises:
        IdentifierNotFoundError: If no candidate title matches
    """
    wanted = title.strip().lower()
    for candidate in candidates:
        if str(candidate.get(field, "")).lower() == wanted:
            return candidate.get("id")
    raise IdentifierNotFoundError(title, candidates)


def resolve_label_ids(csv_titles: str, candidates: list[dict[str, Any]]) -> list[Any]:
    """Resolve a comma separated list of titles, skipping unknown ones."""
    ids = []
    for title in csv_titles.split(","):
        title = title.strip()
        if not title:
            continue
        try:
            ids.append(resolve_label_like_id(title, candidates))
        except IdentifierNotFoundError:
            logger.debug(f"Skipping unknown label '{title}'")
    return ids


def normalize_color(value: str) -> str:
    """
    Turn a palette name or hex code into the 6 digit hex the API stores.

    Unknown values are passed through upper-cased for the backend to validate.
    """
    cleaned = value.strip().lstrip("#")
    return COLOR_MAP.get(cleaned.lower(), cleaned.upper())


def normalize_workflow_status(value: Union[str, int, None]) -> int:
    """0 = todo, 1 = done, 2 = in progress. Anything unknown is todo."""
    if value is None:
        return 0
    if isinstance(value, int) and not isinstance(value, bool):
        return value if value in (0, 1, 2) else 0
    text = str(value).strip().lower()
    if text.isdigit():
        number = int(text)
        return number if number in (0, 1, 2) else 0
    return WORKFLOW_STATUS_MAP.get(text, 0)
