"""Configuration read from environment variables."""
import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    """Runtime settings."""
    events_table: str = 'joinme-events'
    groups_table: str = 'joinme-groups'
    region_name: str = 'us-east-1'
    log_level: str = 'INFO'
    notification_lead_minutes: int = 15


def load_settings() -> Settings:
    """
    Build Settings from the environment.

    Recognized variables: EVENTS_TABLE, GROUPS_TABLE, AWS_REGION, LOG_LEVEL,
    NOTIFICATION_LEAD_MINUTES. Unset variables keep their defaults.

    Raises:
        ValueError: If NOTIFICATION_LEAD_MINUTES is not an integer
    """
    defaults = Settings()
    return Settings(
        events_table=os.environ.get('EVENTS_TABLE', defaults.events_table),
        groups_table=os.environ.get('GROUPS_TABLE', defaults.groups_table),
        region_name=os.environ.get('AWS_REGION', defaults.region_name),
        log_level=os.environ.get('LOG_LEVEL', defaults.log_level),
        notification_lead_minutes=int(
            os.environ.get(
                'NOTIFICATION_LEAD_MINUTES', str(defaults.notification_lead_minutes)
            )
        )
    )
