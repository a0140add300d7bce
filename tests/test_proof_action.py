"""
Tests for the stdin/JSON proof action.
"""

import io
import runpy
from unittest.mock import Mock, patch

import pytest

from agents.proof_action import agent_submit, validate_input
from shared.schemas.proof_schema import ProofResult


@pytest.fixture
def orchestrator():
    orchestrator = Mock()
    orchestrator.request_contribution_proof.return_value = ProofResult(
        file_id=42, job_id=7, proof_data={"ok": True}, tx_hash="0xabc"
    )
    return orchestrator


def test_submit_returns_result_dict(orchestrator):
    result = agent_submit({"file_id": 42, "encryption_key": "seed"}, orchestrator=orchestrator)

    assert result == {"file_id": 42, "job_id": 7, "proof_data": {"ok": True}, "tx_hash": "0xabc"}
    orchestrator.request_contribution_proof.assert_called_once_with(42, "seed")


@pytest.mark.parametrize("payload, field", [
    ({"encryption_key": "seed"}, "file_id"),
    ({"file_id": "42", "encryption_key": "seed"}, "file_id"),
    ({"file_id": True, "encryption_key": "seed"}, "file_id"),
    ({"file_id": -1, "encryption_key": "seed"}, "file_id"),
    ({"file_id": 42}, "encryption_key"),
    ({"file_id": 42, "encryption_key": "  "}, "encryption_key"),
])
def test_invalid_input(payload, field, orchestrator):
    with pytest.raises(ValueError, match=field):
        agent_submit(payload, orchestrator=orchestrator)

    orchestrator.request_contribution_proof.assert_not_called()


@patch("agents.proof_action.build_orchestrator")
@patch("agents.proof_action.load_settings")
def test_builds_orchestrator_from_settings(mock_load_settings, mock_build, orchestrator):
    mock_build.return_value = orchestrator

    agent_submit({"file_id": 42, "encryption_key": "seed"})

    mock_build.assert_called_once_with(mock_load_settings.return_value)


def test_workflow_errors_propagate(orchestrator):
    orchestrator.request_contribution_proof.side_effect = RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        agent_submit({"file_id": 42, "encryption_key": "seed"}, orchestrator=orchestrator)


@pytest.mark.parametrize("payload", [[1], "42", None, 42])
def test_non_object_input_is_invalid(payload, orchestrator):
    with pytest.raises(ValueError, match="JSON object"):
        agent_submit(payload, orchestrator=orchestrator)

    orchestrator.request_contribution_proof.assert_not_called()


def test_validate_input_returns_fields():
    assert validate_input({"file_id": 0, "encryption_key": "seed"}) == (0, "seed")


@patch("agents.proof_action.build_orchestrator")
@patch("agents.proof_action.load_settings")
def test_input_checked_before_settings_are_loaded(mock_load_settings, mock_build):
    with pytest.raises(ValueError, match="file_id"):
        agent_submit({"encryption_key": "seed"})

    mock_load_settings.assert_not_called()
    mock_build.assert_not_called()


def _run_cli(monkeypatch, stdin_text):
    monkeypatch.setattr("sys.stdin", io.StringIO(stdin_text))
    with pytest.raises(SystemExit) as excinfo:
        runpy.run_module("agents.proof_action", run_name="__main__")
    return excinfo.value.code


def test_cli_rejects_non_object_input(monkeypatch):
    assert _run_cli(monkeypatch, "[1]") == 2


def test_cli_bad_configuration_is_not_an_input_error(monkeypatch):
    monkeypatch.setenv("CONFIRMATIONS", "abc")

    assert _run_cli(monkeypatch, '{"file_id": 42, "encryption_key": "seed"}') == 1
