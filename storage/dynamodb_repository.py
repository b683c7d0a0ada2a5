"""DynamoDB-backed repositories, the authoritative remote store."""
import logging
import uuid
from abc import abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import ClientError

from processor.models import Event, EventType, EventVisibility, Group, Location
from storage.base import EventsRepository, GroupsRepository, Repository, T

logger = logging.getLogger(__name__)


class DynamoDBRepository(Repository[T]):
    """
    Repository stored in a single DynamoDB table keyed by a string id.

    Every call goes to the network. ClientError is logged and re-raised
    unchanged; there is no retry.
    """

    KEY_ATTRIBUTE = 'id'

    def __init__(self, table_name: str, region_name: Optional[str] = None):
        """
        Initialize DynamoDB resource and table reference.

        Args:
            table_name: Name of the DynamoDB table
            region_name: AWS region, defaults to the boto3 session region
        """
        self.table_name = table_name
        self.dynamodb = boto3.resource('dynamodb', region_name=region_name)
        self.table = self.dynamodb.Table(table_name)
        logger.info(f"Initialized {type(self).__name__} for table: {table_name}")

    def new_id(self) -> str:
        return uuid.uuid4().hex

    def list(self) -> List[T]:
        """
        Retrieve every entity using a paginated Scan.

        Items that cannot be converted are logged and skipped.

        Returns:
            List of entities in scan order
        """
        logger.info(f"Scanning DynamoDB table {self.table_name}")

        try:
            response = self.table.scan()
            items = response.get('Items', [])

            while 'LastEvaluatedKey' in response:
                response = self.table.scan(
                    ExclusiveStartKey=response['LastEvaluatedKey']
                )
                items.extend(response.get('Items', []))
        except ClientError as e:
            logger.error(f"Error scanning DynamoDB table {self.table_name}: {e}")
            raise

        entities = []
        for item in items:
            entity = self._item_to_entity(item)
            if entity is not None:
                entities.append(entity)

        logger.info(f"Retrieved {len(entities)} {self.collection} from DynamoDB")
        return entities

    def get(self, entity_id: str) -> Optional[T]:
        try:
            response = self.table.get_item(Key={self.KEY_ATTRIBUTE: entity_id})
        except ClientError as e:
            logger.error(f"Error reading {entity_id} from {self.table_name}: {e}")
            raise

        item = response.get('Item')
        if item is None:
            return None
        return self._item_to_entity(item)

    def add(self, entity: T) -> None:
        self._put(entity)

    def edit(self, entity_id: str, new_value: T) -> None:
        """
        Replace the stored record under ``entity_id`` with ``new_value``.

        The record is written under ``entity_id`` even if ``new_value``
        carries another id.
        """
        item = self._entity_to_item(new_value)
        item[self.KEY_ATTRIBUTE] = entity_id
        self._put_item(item)

    def remove(self, entity_id: str) -> None:
        try:
            self.table.delete_item(Key={self.KEY_ATTRIBUTE: entity_id})
        except ClientError as e:
            logger.error(f"Error deleting {entity_id} from {self.table_name}: {e}")
            raise
        logger.info(f"Deleted {entity_id} from {self.table_name}")

    def _put(self, entity: T) -> None:
        self._put_item(self._entity_to_item(entity))

    def _put_item(self, item: Dict[str, Any]) -> None:
        try:
            self.table.put_item(Item=item)
        except ClientError as e:
            logger.error(
                f"Error writing {item.get(self.KEY_ATTRIBUTE)} to {self.table_name}: {e}"
            )
            raise

    @abstractmethod
    def _item_to_entity(self, item: dict) -> Optional[T]:
        """Convert a DynamoDB item, returning None when it is unusable."""

    @abstractmethod
    def _entity_to_item(self, entity: T) -> Dict[str, Any]:
        """Convert an entity to a DynamoDB item."""


class EventsRepositoryDynamoDB(DynamoDBRepository[Event], EventsRepository):
    """Events stored in DynamoDB."""

    KEY_ATTRIBUTE = 'event_id'

    def add(self, event: Event) -> None:
        """Store a new event; its owner always appears among the participants."""
        participants = list(dict.fromkeys(event.participants + [event.owner_id]))
        item = self._entity_to_item(event)
        item['participants'] = participants
        self._put_item(item)

    def _item_to_entity(self, item: dict) -> Optional[Event]:
        """
        Convert a DynamoDB item to an Event.

        Unknown attributes are ignored. Missing optional attributes fall back
        to defaults; a missing title, date or owner makes the item unusable,
        and so does a date without a UTC offset.

        Args:
            item: DynamoDB item dictionary

        Returns:
            Event object or None if conversion fails
        """
        try:
            location_data = item.get('location')
            location = None
            if location_data:
                location = Location(
                    latitude=float(location_data.get('latitude', 0)),
                    longitude=float(location_data.get('longitude', 0)),
                    name=location_data.get('name', '')
                )

            return Event(
                event_id=item['event_id'],
                type=EventType(item.get('type', EventType.SOCIAL.value)),
                title=item['title'],
                description=item.get('description', ''),
                location=location,
                date=datetime.fromisoformat(item['date']),
                duration=int(item.get('duration', 0)),
                participants=list(item.get('participants', [])),
                max_participants=int(item.get('max_participants', 0)),
                visibility=EventVisibility(
                    item.get('visibility', EventVisibility.PUBLIC.value)
                ),
                owner_id=item['owner_id']
            )
        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"Failed to convert item to Event: {e}")
            return None

    def _entity_to_item(self, event: Event) -> Dict[str, Any]:
        item = {
            'event_id': event.event_id,
            'type': event.type.value,
            'title': event.title,
            'description': event.description,
            'date': event.date.isoformat(),
            'duration': event.duration,
            'participants': list(event.participants),
            'max_participants': event.max_participants,
            'visibility': event.visibility.value,
            'owner_id': event.owner_id
        }

        # DynamoDB rejects floats
        if event.location:
            item['location'] = {
                'latitude': Decimal(str(event.location.latitude)),
                'longitude': Decimal(str(event.location.longitude)),
                'name': event.location.name
            }

        return item


class GroupsRepositoryDynamoDB(DynamoDBRepository[Group], GroupsRepository):
    """Groups stored in DynamoDB."""

    KEY_ATTRIBUTE = 'id'

    def _item_to_entity(self, item: dict) -> Optional[Group]:
        try:
            return Group(
                id=item['id'],
                name=item['name'],
                owner_id=item['owner_id'],
                description=item.get('description', ''),
                member_ids=list(item.get('member_ids', [])),
                category=EventType(item.get('category', EventType.ACTIVITY.value)),
                event_ids=list(item.get('event_ids', [])),
                photo_url=item.get('photo_url')
            )
        except (KeyError, ValueError, TypeError) as e:
            logger.warning(f"Failed to convert item to Group: {e}")
            return None

    def _entity_to_item(self, group: Group) -> Dict[str, Any]:
        item = {
            'id': group.id,
            'name': group.name,
            'owner_id': group.owner_id,
            'description': group.description,
            'member_ids': list(group.member_ids),
            'category': group.category.value,
            'event_ids': list(group.event_ids)
        }

        if group.photo_url:
            item['photo_url'] = group.photo_url

        return item
