"""Tests for the Lambda entry point."""

from types import SimpleNamespace
from unittest.mock import patch, MagicMock

import pytest

from fleetdns import handler as handler_module
from fleetdns.base.config import EngineConfig
from fleetdns.base.exceptions import EventValidationError
from fleetdns.models import LifecycleEvent, LifecycleState, Outcome

EVENT = {
    "source": "aws.ec2",
    "detail-type": "EC2 Instance State-change Notification",
    "detail": {"instance-id": "i-abcd1111", "state": "shutting-down"},
}


@pytest.fixture
def engine(monkeypatch):
    monkeypatch.setattr(handler_module, "_engine", None)
    with patch("fleetdns.handler.build_engine") as mock_build:
        mock_engine = MagicMock()
        mock_engine.config = EngineConfig()
        mock_engine.reconcile.return_value = Outcome.no_action("HostName tag not found")
        mock_build.return_value = mock_engine
        yield mock_engine, mock_build


class TestHandler:
    def test_reconciles_event(self, engine):
        mock_engine, _ = engine
        context = SimpleNamespace(log_stream_name="2019/11/11/[$LATEST]abc")
        result = handler_module.handler(EVENT, context)
        assert result == "2019/11/11/[$LATEST]abc"
        mock_engine.reconcile.assert_called_once_with(
            LifecycleEvent("i-abcd1111", LifecycleState.TERMINATING)
        )

    def test_engine_reused(self, engine):
        _, mock_build = engine
        handler_module.handler(EVENT, None)
        handler_module.handler(EVENT, None)
        mock_build.assert_called_once()

    def test_invalid_event(self, engine):
        mock_engine, _ = engine
        with pytest.raises(EventValidationError):
            handler_module.handler({"source": "aws.s3"}, None)
        mock_engine.reconcile.assert_not_called()

    def test_failure_propagates(self, engine):
        mock_engine, _ = engine
        mock_engine.reconcile.side_effect = RuntimeError("boom")
        with pytest.raises(RuntimeError):
            handler_module.handler(EVENT, None)
