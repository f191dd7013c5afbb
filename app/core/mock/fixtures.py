"""
Static dataset used when the remote backend is unavailable.

Rows use the same shape as the remote tables.
"""

import copy

DEMO_PROFILES = [
    {
        "id": "1",
        "name": "Admin User",
        "email": "admin@example.com",
        "roles": ["admin"],
        "teams": [],
        "assigned_teams": [],
        "parent_of": [],
        "is_active": True,
        "created_at": "2024-01-01T00:00:00+00:00",
        "updated_at": "2024-01-01T00:00:00+00:00",
    },
    {
        "id": "2",
        "name": "Trainer Hans",
        "email": "trainer@example.com",
        "roles": ["trainer"],
        "teams": ["1", "2"],
        "assigned_teams": ["1", "2"],
        "parent_of": [],
        "is_active": True,
        "created_at": "2024-01-15T00:00:00+00:00",
        "updated_at": "2024-01-15T00:00:00+00:00",
    },
    {
        "id": "3",
        "name": "Player Max",
        "email": "player@example.com",
        "roles": ["player"],
        "teams": ["1"],
        "assigned_teams": [],
        "parent_of": [],
        "is_active": True,
        "created_at": "2024-02-01T00:00:00+00:00",
        "updated_at": "2024-02-01T00:00:00+00:00",
    },
]

DEMO_TEAMS = [
    {
        "id": "1",
        "name": "U14 M",
        "category": "U14",
        "gender": "M",
        "season": "2024/25",
        "trainers": ["2"],
        "players": ["3"],
        "training_times": [
            {"day": "tuesday", "start_time": "17:00", "end_time": "18:30", "location": "Sporthalle Mitte"},
            {"day": "friday", "start_time": "17:00", "end_time": "18:30", "location": "Sporthalle Mitte"},
        ],
        "is_active": True,
        "created_at": "2024-01-01T00:00:00+00:00",
        "updated_at": "2024-01-01T00:00:00+00:00",
    },
    {
        "id": "2",
        "name": "U16 F",
        "category": "U16",
        "gender": "F",
        "season": "2024/25",
        "trainers": ["2"],
        "players": [],
        "training_times": [
            {"day": "monday", "start_time": "18:00", "end_time": "19:30", "location": "Sporthalle Ost"},
            {"day": "wednesday", "start_time": "18:00", "end_time": "19:30", "location": "Sporthalle Ost"},
        ],
        "is_active": True,
        "created_at": "2024-01-01T00:00:00+00:00",
        "updated_at": "2024-01-01T00:00:00+00:00",
    },
    {
        "id": "3",
        "name": "4. Liga M",
        "category": "4. Liga",
        "gender": "M",
        "season": "2024/25",
        "trainers": ["2"],
        "players": ["3"],
        "training_times": [
            {"day": "tuesday", "start_time": "20:00", "end_time": "21:30", "location": "Sporthalle West"},
            {"day": "thursday", "start_time": "20:00", "end_time": "21:30", "location": "Sporthalle West"},
        ],
        "is_active": True,
        "created_at": "2024-01-01T00:00:00+00:00",
        "updated_at": "2024-01-01T00:00:00+00:00",
    },
]

DEMO_EVENTS = [
    {
        "id": "1",
        "title": "Training",
        "date": "2025-07-15",
        "type": "training",
        "time": "19:00",
        "location": "Sporthalle Mitte",
        "participants": [],
        "created_by": "2",
        "requires_approval": False,
        "team_id": "1",
        "created_at": "2025-07-01T00:00:00+00:00",
        "updated_at": "2025-07-01T00:00:00+00:00",
    },
    {
        "id": "2",
        "title": "Spiel vs. Eagles",
        "date": "2025-07-18",
        "type": "game",
        "time": "20:00",
        "location": "Heimhalle",
        "venue_type": "indoor",
        "opponent": "Eagles Volleyball",
        "participants": ["3"],
        "max_participants": 12,
        "created_by": "2",
        "requires_approval": False,
        "team_id": "3",
        "created_at": "2025-07-01T00:00:00+00:00",
        "updated_at": "2025-07-01T00:00:00+00:00",
    },
    {
        "id": "3",
        "title": "Stadtmeisterschaft",
        "date": "2025-07-25",
        "type": "tournament",
        "time": "10:00",
        "location": "Zentrale Sporthalle",
        "participants": [],
        "created_by": "1",
        "requires_approval": True,
        "created_at": "2025-07-01T00:00:00+00:00",
        "updated_at": "2025-07-01T00:00:00+00:00",
    },
]

DEMO_HELPER_TASKS = [
    {
        "id": "1",
        "event_id": "3",
        "task": "Schiedsrichter",
        "status": "open",
        "assigned_to": "3",
        "assigned_date": "2025-07-02T00:00:00+00:00",
        "created_by": "1",
        "priority": "high",
        "created_at": "2025-07-02T00:00:00+00:00",
        "updated_at": "2025-07-02T00:00:00+00:00",
    },
    {
        "id": "2",
        "event_id": "3",
        "task": "Catering",
        "status": "completed",
        "assigned_to": "2",
        "assigned_date": "2025-07-01T00:00:00+00:00",
        "completed_date": "2025-07-25T18:00:00+00:00",
        "created_by": "1",
        "description": "Kuchen und Getränke",
        "priority": "medium",
        "created_at": "2025-07-01T00:00:00+00:00",
        "updated_at": "2025-07-25T18:00:00+00:00",
    },
]


def get_demo_dataset() -> dict[str, list[dict]]:
    """Fresh copy of all demo tables."""

    return copy.deepcopy(
        {
            "profiles": DEMO_PROFILES,
            "teams": DEMO_TEAMS,
            "events": DEMO_EVENTS,
            "helper_tasks": DEMO_HELPER_TASKS,
        }
    )
