"""
Theme Park Wait Watch - Email Utilities Unit Tests

Tests SendGrid-backed operator alerts with the client mocked.
"""

from unittest.mock import Mock, patch

from utils.email_utils import send_alert_email


def _sendgrid(status_code=202):
    client = Mock()
    client.send.return_value = Mock(status_code=status_code)
    return client


class TestSendAlertEmail:

    def test_returns_false_without_api_key(self):
        with patch('utils.email_utils.SENDGRID_API_KEY', ''), \
                patch('utils.email_utils.SendGridAPIClient') as mock_cls:
            assert send_alert_email("subject", "body") is False

        mock_cls.assert_not_called()

    def test_returns_false_without_recipient(self):
        with patch('utils.email_utils.SENDGRID_API_KEY', 'SG.key'), \
                patch('utils.email_utils.ALERT_EMAIL_TO', ''), \
                patch('utils.email_utils.SendGridAPIClient') as mock_cls:
            assert send_alert_email("subject", "body") is False

        mock_cls.assert_not_called()

    def test_sends_via_sendgrid(self):
        client = _sendgrid(202)
        with patch('utils.email_utils.SENDGRID_API_KEY', 'SG.key'), \
                patch('utils.email_utils.ALERT_EMAIL_TO', 'ops@example.com'), \
                patch('utils.email_utils.SendGridAPIClient', return_value=client) as mock_cls:
            sent = send_alert_email("Poller down", "All sources failing", alert_type="all_sources_failed")

        assert sent is True
        mock_cls.assert_called_once_with('SG.key')
        message = client.send.call_args.args[0].get()
        assert message["subject"] == "Poller down"
        assert message["personalizations"][0]["to"][0]["email"] == "ops@example.com"

    def test_non_2xx_status_is_failure(self):
        with patch('utils.email_utils.SENDGRID_API_KEY', 'SG.key'), \
                patch('utils.email_utils.ALERT_EMAIL_TO', 'ops@example.com'), \
                patch('utils.email_utils.SendGridAPIClient', return_value=_sendgrid(401)):
            assert send_alert_email("s", "b") is False

    def test_client_exception_is_failure(self):
        client = Mock()
        client.send.side_effect = Exception("HTTP Error 403: Forbidden")
        with patch('utils.email_utils.SENDGRID_API_KEY', 'SG.key'), \
                patch('utils.email_utils.ALERT_EMAIL_TO', 'ops@example.com'), \
                patch('utils.email_utils.SendGridAPIClient', return_value=client):
            assert send_alert_email("s", "b") is False
