"""
Theme Park Wait Watch - Queue-Times Client Unit Tests

Tests QueueTimesClient with HTTP mocking:
- Client initialization and configuration
- get_park_snapshot() - payload flattening and normalisation
- FetchError on timeout, transport error, HTTP error and malformed payloads
- Singleton pattern for get_queue_times_client()

Priority: P1 - Every poll tick starts here
"""

import pytest
import requests
from unittest.mock import Mock, patch

from collector.queue_times_client import (
    FetchError, ParkSnapshot, QueueTimesClient, get_queue_times_client
)


def _response(payload=None, status_code=200, json_error=None):
    response = Mock()
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(response=response)
    else:
        response.raise_for_status = Mock()
    return response


class TestQueueTimesClientInit:
    """Test QueueTimesClient initialization."""

    def test_init_with_default_base_url(self):
        client = QueueTimesClient()

        assert client.base_url == "https://queue-times.com/parks"
        assert client.timeout == 30

    def test_init_strips_trailing_slash(self):
        client = QueueTimesClient(base_url="https://api.example.com/")

        assert client.base_url == "https://api.example.com"

    def test_init_sets_headers(self):
        client = QueueTimesClient()

        assert isinstance(client.session, requests.Session)
        assert 'ThemeParkWaitWatch' in client.session.headers['User-Agent']
        assert client.session.headers['Accept'] == 'application/json'


class TestGetParkSnapshot:
    """Test get_park_snapshot() parsing."""

    def test_requests_park_url_with_timeout(self, sample_queue_times_payload):
        client = QueueTimesClient(base_url="https://api.example.com/parks", timeout=30)

        with patch.object(client.session, 'get',
                          return_value=_response(sample_queue_times_payload)) as mock_get:
            client.get_park_snapshot(6)

        mock_get.assert_called_once_with(
            "https://api.example.com/parks/6/queue_times.json",
            timeout=30
        )

    def test_flattens_lands_rides_and_shows(self, sample_queue_times_payload):
        client = QueueTimesClient(base_url="https://api.example.com/parks")

        with patch.object(client.session, 'get', return_value=_response(sample_queue_times_payload)):
            snapshot = client.get_park_snapshot(1)

        assert isinstance(snapshot, ParkSnapshot)
        assert snapshot.park_id == 1
        assert sorted(e.source_entity_id for e in snapshot.entries) == [130, 284, 285, 900]

    def test_is_open_maps_to_status(self, sample_queue_times_payload):
        client = QueueTimesClient(base_url="https://api.example.com/parks")

        with patch.object(client.session, 'get', return_value=_response(sample_queue_times_payload)):
            entries = {e.source_entity_id: e for e in client.get_park_snapshot(1).entries}

        assert entries[284].status == "open"
        assert entries[284].wait_minutes == 45
        assert entries[285].status == "closed"

    def test_status_strings_are_normalised(self, sample_queue_times_payload):
        client = QueueTimesClient(base_url="https://api.example.com/parks")

        with patch.object(client.session, 'get', return_value=_response(sample_queue_times_payload)):
            entries = {e.source_entity_id: e for e in client.get_park_snapshot(1).entries}

        assert entries[130].status == "open"
        assert entries[900].status == "unknown"
        assert entries[900].wait_minutes is None

    def test_negative_wait_becomes_none(self):
        client = QueueTimesClient(base_url="https://api.example.com/parks")
        payload = {"rides": [{"id": 1, "name": "Dumbo", "status": "down", "wait_time": -1}]}

        with patch.object(client.session, 'get', return_value=_response(payload)):
            entry = client.get_park_snapshot(1).entries[0]

        assert entry.wait_minutes is None
        assert entry.status == "down"

    def test_items_without_id_are_dropped(self):
        client = QueueTimesClient(base_url="https://api.example.com/parks")
        payload = {"rides": [{"name": "Mystery", "wait_time": 5}, {"id": 2, "name": "Known", "wait_time": 5}]}

        with patch.object(client.session, 'get', return_value=_response(payload)):
            snapshot = client.get_park_snapshot(1)

        assert [e.source_entity_id for e in snapshot.entries] == [2]

    def test_missing_arrays_yield_empty_snapshot(self):
        client = QueueTimesClient(base_url="https://api.example.com/parks")

        with patch.object(client.session, 'get', return_value=_response({})):
            snapshot = client.get_park_snapshot(1)

        assert snapshot.entries == []


class TestGetParkSnapshotErrors:
    """Every failure surfaces as FetchError carrying the park id."""

    def test_timeout_raises_fetch_error(self):
        client = QueueTimesClient(base_url="https://api.example.com/parks")

        with patch.object(client.session, 'get', side_effect=requests.Timeout("slow")):
            with pytest.raises(FetchError) as exc_info:
                client.get_park_snapshot(3)

        assert exc_info.value.park_id == 3
        assert "timed out" in str(exc_info.value)

    def test_connection_error_raises_fetch_error(self):
        client = QueueTimesClient(base_url="https://api.example.com/parks")

        with patch.object(client.session, 'get', side_effect=requests.ConnectionError("refused")):
            with pytest.raises(FetchError):
                client.get_park_snapshot(3)

    def test_no_retry_on_failure(self):
        client = QueueTimesClient(base_url="https://api.example.com/parks")

        with patch.object(client.session, 'get', side_effect=requests.Timeout()) as mock_get:
            with pytest.raises(FetchError):
                client.get_park_snapshot(3)

        assert mock_get.call_count == 1

    @pytest.mark.parametrize("status_code", [404, 500, 503])
    def test_http_error_raises_fetch_error(self, status_code):
        client = QueueTimesClient(base_url="https://api.example.com/parks")

        with patch.object(client.session, 'get', return_value=_response(status_code=status_code)):
            with pytest.raises(FetchError) as exc_info:
                client.get_park_snapshot(2)

        assert f"HTTP {status_code}" in str(exc_info.value)

    def test_non_json_body_raises_fetch_error(self):
        client = QueueTimesClient(base_url="https://api.example.com/parks")

        with patch.object(client.session, 'get',
                          return_value=_response(json_error=ValueError("Expecting value"))):
            with pytest.raises(FetchError) as exc_info:
                client.get_park_snapshot(2)

        assert "not valid JSON" in str(exc_info.value)

    def test_non_object_body_raises_fetch_error(self):
        client = QueueTimesClient(base_url="https://api.example.com/parks")

        with patch.object(client.session, 'get', return_value=_response([1, 2, 3])):
            with pytest.raises(FetchError) as exc_info:
                client.get_park_snapshot(2)

        assert "not a JSON object" in str(exc_info.value)


class TestSingleton:

    def test_get_queue_times_client_returns_same_instance(self):
        with patch('collector.queue_times_client._client', None):
            first = get_queue_times_client()
            second = get_queue_times_client()

        assert first is second
