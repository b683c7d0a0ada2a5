"""Shared fixtures."""
import os
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import boto3
import pytest
from moto import mock_aws

from processor.models import Event, EventType, EventVisibility, Group

NOW = datetime(2025, 3, 14, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed reference instant."""
    return NOW


@pytest.fixture
def make_event():
    """Factory building events relative to NOW."""
    def _make_event(
        event_id='event-1',
        start=None,
        duration=60,
        participants=None,
        max_participants=10,
        title=None,
        owner_id='owner-1'
    ):
        return Event(
            event_id=event_id,
            type=EventType.SPORTS,
            title=title or f'Event {event_id}',
            description='Pickup football',
            location=None,
            date=start if start is not None else NOW + timedelta(hours=2),
            duration=duration,
            participants=participants if participants is not None else [],
            max_participants=max_participants,
            visibility=EventVisibility.PUBLIC,
            owner_id=owner_id
        )
    return _make_event


@pytest.fixture
def make_group():
    """Factory building groups."""
    def _make_group(group_id='group-1', member_ids=None, owner_id='owner-1'):
        return Group(
            id=group_id,
            name=f'Group {group_id}',
            owner_id=owner_id,
            description='Weekly runs',
            member_ids=member_ids if member_ids is not None else [owner_id]
        )
    return _make_group


@pytest.fixture
def aws_credentials():
    """Fake AWS credentials so boto3 never reaches a real account."""
    env_vars = {
        'AWS_ACCESS_KEY_ID': 'testing',
        'AWS_SECRET_ACCESS_KEY': 'testing',
        'AWS_SECURITY_TOKEN': 'testing',
        'AWS_SESSION_TOKEN': 'testing',
        'AWS_DEFAULT_REGION': 'us-east-1'
    }
    with patch.dict(os.environ, env_vars):
        yield env_vars


@pytest.fixture
def dynamodb_tables(aws_credentials):
    """Create mock events and groups tables."""
    with mock_aws():
        dynamodb = boto3.resource('dynamodb', region_name='us-east-1')

        events_table = dynamodb.create_table(
            TableName='test-events',
            KeySchema=[{'AttributeName': 'event_id', 'KeyType': 'HASH'}],
            AttributeDefinitions=[
                {'AttributeName': 'event_id', 'AttributeType': 'S'}
            ],
            BillingMode='PAY_PER_REQUEST'
        )
        groups_table = dynamodb.create_table(
            TableName='test-groups',
            KeySchema=[{'AttributeName': 'id', 'KeyType': 'HASH'}],
            AttributeDefinitions=[
                {'AttributeName': 'id', 'AttributeType': 'S'}
            ],
            BillingMode='PAY_PER_REQUEST'
        )

        yield {'events': events_table, 'groups': groups_table}
