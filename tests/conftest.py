"""
Pytest configuration and fixtures
"""

import pytest

from sentry_mcp.models.config import AppConfig, SentryConfig


@pytest.fixture
def mock_sentry_config():
    """Mock SentryConfig for testing"""
    return SentryConfig(
        host="https://sentry.example.com",
        auth_token="test_auth_token",
        timeout=10,
    )


@pytest.fixture
def mock_app_config(mock_sentry_config):
    """Mock AppConfig for testing"""
    return AppConfig(sentry=mock_sentry_config, server_name="Sentry", debug=False)


@pytest.fixture
def mock_project_data():
    """Sample Sentry project"""
    return {
        "id": "1",
        "name": "Demo",
        "slug": "demo",
        "teams": [{"name": "core"}],
    }


@pytest.fixture
def mock_issue_data():
    """Sample Sentry issue"""
    return {
        "id": "12345",
        "shortId": "TEST-1",
        "title": "DatabaseConnectionError",
        "culprit": "src/database.py in connect",
        "permalink": "https://sentry.example.com/issues/12345/",
        "status": "unresolved",
        "level": "error",
        "count": "150",
        "userCount": 25,
        "firstSeen": "2024-06-18T10:00:00.000Z",
        "lastSeen": "2024-06-18T15:30:00.000Z",
        "project": {"id": "1", "name": "Demo", "slug": "demo"},
        "tags": [{"key": "environment", "value": "production"}],
        "stats": {"24h": [[1000, 5], [2000, 3]]},
    }


@pytest.fixture
def mock_event_data():
    """Sample Sentry event with a stack trace"""
    return {
        "id": "abc123",
        "eventID": "abc123",
        "title": "ValueError: invalid room",
        "platform": "python",
        "dateCreated": "2024-06-18T15:30:00Z",
        "culprit": "app.rooms in join",
        "tags": [
            {"key": "environment", "value": "production"},
            {"key": "level", "value": "error"},
            {"key": "browser", "value": "Firefox"},
        ],
        "user": {"id": "u1", "email": "alice@example.com", "username": "", "ip_address": None},
        "context": {"roomId": "42"},
        "contexts": {"runtime": {"name": "CPython"}},
        "extra": {"attempt": 2},
        "entries": [
            {
                "type": "stacktrace",
                "data": {
                    "frames": [
                        {
                            "filename": "lib/http.py",
                            "lineNo": 10,
                            "function": "dispatch",
                            "inApp": False,
                        },
                        {
                            "filename": "app/rooms.py",
                            "lineNo": 42,
                            "function": "join",
                            "inApp": True,
                            "context": [
                                [41, "    room = load(room_id)"],
                                [42, "    raise ValueError('invalid room')  "],
                            ],
                        },
                    ]
                },
            }
        ],
    }
