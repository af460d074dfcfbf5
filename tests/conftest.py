from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

UTC = ZoneInfo("UTC")


@pytest.fixture
def now():
    return datetime(2026, 1, 9, 12, 0, tzinfo=UTC)


@pytest.fixture
def country_state_document():
    """Stored document: ``state`` is shown only when ``country`` is US."""
    return {
        "version": "1.0.0",
        "id": "address-form",
        "metadata": {
            "title": "Address",
            "createdAt": "2026-01-09T00:00:00.000Z",
            "updatedAt": "2026-01-09T00:00:00.000Z",
        },
        "fields": [
            {
                "id": "country",
                "type": "select",
                "label": "Country",
                "order": 0,
                "config": {
                    "required": True,
                    "options": [
                        {"label": "United States", "value": "US"},
                        {"label": "Canada", "value": "CA"},
                    ],
                },
            },
            {
                "id": "state",
                "type": "text",
                "label": "State",
                "order": 1,
                "config": {"required": True, "helpText": "Two letter code"},
                "conditions": {
                    "show": True,
                    "rules": [{"field": "country", "operator": "equals", "value": "US"}],
                    "logic": "AND",
                },
            },
        ],
        "settings": {
            "submitButton": {"text": "Send", "enabled": True},
            "successMessage": "Thanks!",
            "redirectUrl": "https://example.com/done",
        },
    }
