"""
Tests for the TEE executor HTTP client.
"""

from unittest.mock import Mock, patch

import pytest
import requests

from shared.errors import RemoteServiceError
from tee.executor_client import run_proof

PAYLOAD = {"job_id": 7, "file_id": 42}


def _response(status_code, body=None, text=""):
    resp = Mock(status_code=status_code, text=text)
    if body is None:
        resp.json.side_effect = ValueError("not json")
    else:
        resp.json.return_value = body
    return resp


class TestRunProof:

    @patch("tee.executor_client.requests.post")
    def test_posts_json_to_run_proof(self, mock_post):
        mock_post.return_value = _response(200, {"ok": True})

        assert run_proof("https://tee.example/", PAYLOAD, timeout=12) == {"ok": True}

        mock_post.assert_called_once_with(
            "https://tee.example/RunProof",
            json=PAYLOAD,
            headers={"Content-Type": "application/json"},
            timeout=12,
        )

    @patch("tee.executor_client.requests.post")
    def test_any_2xx_is_success(self, mock_post):
        mock_post.return_value = _response(202, {"queued": True})

        assert run_proof("https://tee.example", PAYLOAD) == {"queued": True}

    @patch("tee.executor_client.requests.post")
    def test_error_status_embeds_body(self, mock_post):
        mock_post.return_value = _response(500, {"error": "bad request"})

        with pytest.raises(RemoteServiceError) as excinfo:
            run_proof("https://tee.example", PAYLOAD)

        assert str(excinfo.value) == 'TEE request failed: {"error":"bad request"}'
        assert excinfo.value.status_code == 500
        assert excinfo.value.body == {"error": "bad request"}

    @patch("tee.executor_client.requests.post")
    def test_redirect_status_is_failure(self, mock_post):
        mock_post.return_value = _response(302, {"location": "elsewhere"})

        with pytest.raises(RemoteServiceError):
            run_proof("https://tee.example", PAYLOAD)

    @patch("tee.executor_client.requests.post")
    def test_non_json_error_body_falls_back_to_text(self, mock_post):
        mock_post.return_value = _response(502, text="Bad Gateway")

        with pytest.raises(RemoteServiceError, match="Bad Gateway") as excinfo:
            run_proof("https://tee.example", PAYLOAD)

        assert excinfo.value.body == "Bad Gateway"

    @patch("tee.executor_client.requests.post")
    def test_transport_failure(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(RemoteServiceError, match="connection refused") as excinfo:
            run_proof("https://tee.example", PAYLOAD)

        assert isinstance(excinfo.value.__cause__, requests.ConnectionError)

    @patch("tee.executor_client.requests.post")
    def test_success_without_json_body(self, mock_post):
        mock_post.return_value = _response(204, text="")

        with pytest.raises(RemoteServiceError, match="non-JSON success body") as excinfo:
            run_proof("https://tee.example", PAYLOAD)

        assert excinfo.value.status_code == 204
