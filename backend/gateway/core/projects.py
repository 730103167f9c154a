"""Project Catalog — the static list served by GET /api/projects."""

PROJECTS: tuple[dict, ...] = (
    {
        "id": "proxmox-infrastructure",
        "category": "infrastructure",
        "status": "live",
        "featured": True,
        "metrics": {"uptime": "99.9%", "users": "50+", "costReduction": "30%"},
    },
    {
        "id": "retool-platform",
        "category": "platform",
        "status": "production",
        "featured": True,
        "metrics": {"users": "50+", "timeSaved": "60%", "efficiency": "95%"},
    },
    {
        "id": "transparency-portal",
        "category": "web-development",
        "status": "coming-soon",
        "featured": True,
        "openSource": True,
        "metrics": {
            "transparency": "100%",
            "openData": "Yes",
            "community": "Government",
        },
    },
)
