# core/navigation.py

from typing import List, Optional

from core.permission_helpers import PermissionPolicy


# -----------------------------------------------------
# Sections shown to a role, each gated by one capability.
# Order matters: clients render the menu top to bottom.
# -----------------------------------------------------
NAVIGATION_SECTIONS = (
    ("manage_users", (
        ("User Management", "/admin/users"),
        ("Account Approvals", "/admin/approvals"),
        ("System Settings", "/admin/settings"),
    )),
    ("view_all_data", (
        ("Executive Dashboard", "/executive/dashboard"),
        ("Custom Reports", "/executive/reports"),
        ("Strategic Overview", "/executive/strategic"),
    )),
    ("strategic_decisions", (
        ("Strategic Approvals", "/strategic/approvals"),
    )),
    ("manage_team", (
        ("Team Management", "/team/manage"),
        ("Leave Approvals", "/team/leaves"),
        ("Task Management", "/team/tasks"),
    )),
    ("assist_team_lead", (
        ("Task Updates", "/coordinator/tasks"),
        ("Team Support", "/coordinator/support"),
    )),
    ("view_tasks", (
        ("My Tasks", "/member/tasks"),
        ("Leave Requests", "/member/leaves"),
        ("Messages", "/member/messages"),
    )),
)

COMMON_ITEMS = (
    ("My Profile", "/profile"),
)

LANDING_PAGES = {
    "admin": "/admin/dashboard",
    "executive": "/executive/dashboard",
}


def menu_for(policy: PermissionPolicy, role: Optional[str]) -> List[dict]:
    items = []
    for capability, entries in NAVIGATION_SECTIONS:
        if not policy.has_permission(role, capability):
            continue
        for label, href in entries:
            items.append({"label": label, "href": href, "capability": capability})

    for label, href in COMMON_ITEMS:
        items.append({"label": label, "href": href, "capability": None})

    return items


def landing_page_for(role: Optional[str]) -> str:
    return LANDING_PAGES.get(str(role) if role else "", "/dashboard")
