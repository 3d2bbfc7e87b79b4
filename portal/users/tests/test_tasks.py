"""
Tests des tâches Celery de l'application users.
"""
from unittest.mock import patch

import pytest
from celery.exceptions import Retry

from core.exceptions import UpstreamUnavailable
from users.tasks import notify_profile_completed_task

PAYLOAD = {'email': 'rep@example.com', 'first_name': 'Jane', 'last_name': 'Smith', 'user_id': 'idp-1'}


def test_sends_notification():
    with patch('users.tasks.notify_profile_completed', return_value=True) as notify:
        assert notify_profile_completed_task(PAYLOAD) is True
    notify.assert_called_once_with(PAYLOAD)


def test_unconfigured_webhook_returns_false():
    assert notify_profile_completed_task(PAYLOAD) is False


def test_upstream_failure_is_retried():
    with patch('users.tasks.notify_profile_completed', side_effect=UpstreamUnavailable('down')), \
            patch.object(notify_profile_completed_task, 'retry', side_effect=Retry()) as retry:
        with pytest.raises(Retry):
            notify_profile_completed_task(PAYLOAD)
    assert retry.call_args.kwargs['countdown'] == 60
    assert isinstance(retry.call_args.kwargs['exc'], UpstreamUnavailable)
