from dataclasses import dataclass, field
from typing import Optional

PAGES = ("home", "people", "projects", "events", "logs", "tasks", "skills")


@dataclass(frozen=True)
class Route:
    page: str = "home"
    record_id: Optional[str] = None
    edit: bool = False
    new: bool = False

    @property
    def is_form(self):
        return self.new or (self.edit and bool(self.record_id))

    @property
    def is_detail(self):
        return bool(self.record_id) and not self.edit


def _flag(value):
    return str(value or "").strip().lower() == "true"


def parse_route(params):
    """Read ``?page=&id=&edit=true&new=true`` into a Route; unknown pages go home."""
    page = str(params.get("page") or "home").strip().lower()
    if page not in PAGES:
        page = "home"
    record_id = str(params.get("id") or "").strip() or None
    return Route(page=page, record_id=record_id, edit=_flag(params.get("edit")), new=_flag(params.get("new")))


def route_params(route):
    params = {"page": route.page}
    if route.record_id:
        params["id"] = route.record_id
    if route.edit:
        params["edit"] = "true"
    if route.new:
        params["new"] = "true"
    return params


@dataclass
class DashboardContext:
    user_email: str
    user_name: str
    route: Route = field(default_factory=Route)
    api_enabled: bool = True
