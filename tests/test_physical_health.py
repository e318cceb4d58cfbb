"""
Physical Health Tests
=====================

Measurement payloads and the once-per-day save.
"""

import json
import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest

from app.core.errors import ErrorCodes, ValidationError
from app.models.physical_health import PhysicalHealth
from app.services.physical_health_service import (
    PhysicalHealthService,
    build_health_payload,
    parse_complaints,
    serialize_log,
)

USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")
NOW = datetime(2026, 3, 10, 9, 30, tzinfo=timezone.utc)


class TestBuildHealthPayload:
    def test_all_blank_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            build_health_payload("", "  ", None, NOW)
        assert exc_info.value.code == ErrorCodes.HEALTH_EMPTY_ENTRY
        assert exc_info.value.message == "Please fill in at least one field"

    def test_partial_entry(self):
        payload = build_health_payload("72.5", None, "", NOW)
        assert payload == {
            "weight": 72.5,
            "sleepHours": None,
            "stepCounts": None,
            "date": NOW.isoformat(),
        }

    def test_step_counts_are_integers(self):
        assert build_health_payload(None, "7.5", "8042", NOW)["stepCounts"] == 8042

    @pytest.mark.parametrize("value", ["abc", "nan", "inf"])
    def test_non_numeric_rejected(self, value):
        with pytest.raises(ValidationError) as exc_info:
            build_health_payload(value, None, None, NOW)
        assert exc_info.value.field == "weight"


class TestParseComplaints:
    def test_valid_json(self):
        assert parse_complaints('{"weight": 70}') == {"weight": 70}

    @pytest.mark.parametrize("raw", [None, "", "not json", "[1, 2]"])
    def test_malformed_is_empty(self, raw):
        assert parse_complaints(raw) == {}

    def test_serialize_log_decodes_complaints(self):
        log = PhysicalHealth(
            id=uuid.uuid4(),
            user_id=USER_ID,
            complaints='{"sleepHours": 8}',
            health_id="health_1",
        )
        assert serialize_log(log)["complaints"] == {"sleepHours": 8}
        assert serialize_log(None) is None


class TestPhysicalHealthService:
    @pytest.mark.asyncio
    async def test_first_save_of_the_day_inserts(self, db):
        service = PhysicalHealthService(db)
        with patch.object(service, "get_today", AsyncMock(return_value=None)):
            log, created = await service.save(USER_ID, weight="70", now=NOW)

        assert created is True
        assert log.health_id == f"health_{int(NOW.timestamp() * 1000)}"
        assert json.loads(log.complaints)["weight"] == 70.0
        db.add.assert_called_once_with(log)

    @pytest.mark.asyncio
    async def test_second_save_updates_todays_row(self, db):
        existing = PhysicalHealth(
            id=uuid.uuid4(),
            user_id=USER_ID,
            complaints='{"weight": 70}',
            health_id="health_1",
        )
        service = PhysicalHealthService(db)
        with patch.object(service, "get_today", AsyncMock(return_value=existing)):
            log, created = await service.save(USER_ID, sleep_hours="6", now=NOW)

        assert created is False
        assert log is existing
        assert json.loads(log.complaints) == {
            "weight": None,
            "sleepHours": 6.0,
            "stepCounts": None,
            "date": NOW.isoformat(),
        }
        assert log.updated_at == NOW
        db.add.assert_not_called()
