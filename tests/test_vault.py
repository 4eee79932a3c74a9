from datetime import timedelta

import pytest
from django.core.management import call_command
from django.utils import timezone

from community.models import Module, VaultResource, CalendarEvent
from community.storage import create_placeholder_files, PLACEHOLDER_FILES
from community.utils import time_ago


def test_placeholders_are_created(settings):
    created = create_placeholder_files()

    assert sorted(created) == sorted(PLACEHOLDER_FILES)
    text = (settings.VAULT_DIR / 'section-609.pdf').read_text()
    assert text.startswith('DEBT ERASER PRO - SECTION-609')


def test_existing_files_are_not_overwritten(settings):
    settings.VAULT_DIR.mkdir(parents=True)
    (settings.VAULT_DIR / 'cease-desist.pdf').write_text('the real template')

    created = create_placeholder_files()

    assert 'cease-desist.pdf' not in created
    assert (settings.VAULT_DIR / 'cease-desist.pdf').read_text() == 'the real template'
    assert create_placeholder_files() == []


@pytest.mark.django_db
def test_vault_files_are_served(client):
    create_placeholder_files()
    response = client.get('/vault/vod-template.pdf')
    assert response.status_code == 200
    assert b'VOD-TEMPLATE' in b''.join(response.streaming_content)


@pytest.mark.django_db
def test_seed_reference_data_is_idempotent():
    call_command('seed_reference_data')
    call_command('seed_reference_data')

    assert Module.objects.count() == 5
    assert list(Module.objects.filter(locked=True).values_list('order_index', flat=True)) == [4, 5]
    assert VaultResource.objects.count() == 5
    assert VaultResource.objects.get(title='Cease & Desist Letter').file_url == '/vault/cease-desist.pdf'
    assert CalendarEvent.objects.count() == 3


@pytest.mark.parametrize('delta, expected', [
    (timedelta(seconds=30), 'just now'),
    (timedelta(minutes=1), '1 minute ago'),
    (timedelta(hours=5), '5 hours ago'),
    (timedelta(days=1), '1 day ago'),
    (timedelta(days=15), '2 weeks ago'),
    (timedelta(days=400), '1 year ago'),
])
def test_time_ago(delta, expected):
    now = timezone.now()
    assert time_ago(now - delta, now=now) == expected
