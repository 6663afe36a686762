from types import MappingProxyType

# ============================================
# CENTRALIZED ROLE → PERMISSIONS MAP
# ============================================
# Each role's capabilities are listed literally. Nothing here is derived
# from ROLE_HIERARCHY: executive ranks above team_lead but does not hold
# manage_team, and only admin holds manage_users.
ROLE_PERMISSIONS = MappingProxyType({

    # =====================================================
    # ADMIN: user administration + account approvals
    # =====================================================
    "admin": frozenset({
        "manage_users",
        "manage_roles",
        "approve_accounts",
        "view_all_data",
        "manage_system",
        "view_audit_logs",
        "strategic_decisions",
    }),

    # =====================================================
    # EXECUTIVE: reporting + strategic approvals
    # =====================================================
    "executive": frozenset({
        "view_all_data",
        "custom_reporting",
        "broadcast_announcements",
        "strategic_decisions",
        "approve_strategic",
    }),

    # =====================================================
    # TEAM LEAD
    # =====================================================
    "team_lead": frozenset({
        "manage_team",
        "approve_leaves",
        "track_attendance",
        "view_team_data",
    }),

    # =====================================================
    # COORDINATOR
    # =====================================================
    "coordinator": frozenset({
        "assist_team_lead",
        "update_task_status",
        "view_team_data",
    }),

    # =====================================================
    # MEMBER
    # =====================================================
    "member": frozenset({
        "view_tasks",
        "submit_leaves",
        "track_attendance",
        "send_messages",
    }),
})


# Informational ranking only (display ordering in admin screens).
ROLE_HIERARCHY = MappingProxyType({
    "admin": 5,
    "executive": 4,
    "team_lead": 3,
    "coordinator": 2,
    "member": 1,
})
