"""Push notifications to the admin through ntfy.sh.

The admin subscribes to two ntfy topics: one for new place submissions and
one for contact-form messages. Every send is best effort.
"""

import logging
from dataclasses import dataclass, field
from email.header import Header

import requests
from flask import current_app

from bookmaru.constants import KNOWN_CATEGORIES
from bookmaru.errors import NotificationError

logger = logging.getLogger(__name__)

NTFY_TIMEOUT_SECONDS = 10


@dataclass
class NtfyNotification:
    title: str
    message: str
    priority: str | None = None  # 'min', 'low', 'default', 'high', 'max'
    tags: list = field(default_factory=list)
    click: str | None = None
    attach: str | None = None


def send_ntfy_notification(topic: str, notification: NtfyNotification) -> bool:
    """
    POST a notification to an ntfy topic.

    Args:
        topic: The ntfy topic (e.g. 'Bookmaru-entry')
        notification: What to send

    Returns:
        True when ntfy accepted the message

    Raises:
        NotificationError: topic missing, unencodable header, network failure
            or non-2xx answer
    """
    if not topic:
        raise NotificationError('ntfy topic is not configured')

    base_url = current_app.config.get('NTFY_BASE_URL', 'https://ntfy.sh').rstrip('/')
    url = f'{base_url}/{topic}'

    headers = {'Title': notification.title}
    if notification.priority:
        headers['Priority'] = notification.priority
    if notification.tags:
        headers['Tags'] = ','.join(notification.tags)
    if notification.click:
        headers['Click'] = notification.click
    if notification.attach:
        headers['Attach'] = notification.attach
    # HTTP headers must be latin-1; ntfy decodes RFC 2047 for anything else
    headers = {name: _header_value(value) for name, value in headers.items()}

    try:
        response = requests.post(
            url,
            data=notification.message.encode('utf-8'),
            headers=headers,
            timeout=NTFY_TIMEOUT_SECONDS,
        )
    except requests.RequestException as e:
        raise NotificationError(f'ntfy request failed: {e}') from e
    except (UnicodeError, ValueError) as e:
        raise NotificationError(f'ntfy request could not be encoded: {e}') from e

    if not response.ok:
        raise NotificationError(f'ntfy answered {response.status_code} for topic {topic}')

    logger.info(f"[NTFY] Sent '{notification.title}' to {topic}")
    return True


def _header_value(value: str) -> str:
    try:
        value.encode('latin-1')
        return value
    except UnicodeEncodeError:
        # maxlinelen=0 keeps the encoded word on one line; folded headers are rejected
        return Header(value, 'utf-8').encode(maxlinelen=0)


def build_new_entry_notification(place_data: dict) -> NtfyNotification:
    """Summarize a new submission in its original language."""
    language = place_data.get('original_language')
    suffix = 'ko' if language == 'ko' else 'en'

    name = place_data.get(f'name_{suffix}')
    city = place_data.get(f'city_{suffix}')
    district = place_data.get(f'district_{suffix}')
    area = ', '.join(part for part in (city, district) if part)

    message_parts = [f"Location: {name or 'N/A'}"]
    if area:
        message_parts.append(f"Area: {area}")
    category = place_data.get('category')
    known = category in KNOWN_CATEGORIES
    if category:
        message_parts.append(f"Category: {category}" + ('' if known else ' (new)'))
    if language:
        message_parts.append(f"Language: {language}")

    return NtfyNotification(
        title='New Bookmaru Entry',
        message='\n'.join(message_parts),
        priority='default',
        # 'books' renders as an emoji in the ntfy client
        tags=['books', 'bookmaru', 'new-entry', category if known else 'location'],
    )


def build_contact_notification(email: str | None, message: str) -> NtfyNotification:
    message_parts = [
        f"From: {email}" if email else 'From: Anonymous',
        '',
        'Message:',
        message,
    ]
    return NtfyNotification(
        title='Contact Message',
        message='\n'.join(message_parts),
        priority='default',
        tags=['email', 'bookmaru', 'contact'],
    )


def notify_new_entry(place_data: dict) -> bool:
    """Tell the admin a place is waiting for moderation."""
    topic = current_app.config.get('NTFY_TOPIC')
    return send_ntfy_notification(topic, build_new_entry_notification(place_data))


def notify_contact(email: str | None, message: str) -> bool:
    """Forward a contact-form message to the admin."""
    topic = current_app.config.get('NTFY_TOPIC_CONTACT')
    return send_ntfy_notification(topic, build_contact_notification(email, message))


def enqueue_notification(func, *args, **kwargs) -> None:
    """Hand a notification to the task queue without waiting for it.

    The task runs inside its own app context so it can read config from the
    worker thread. NotificationError and anything else it raises stays in the
    queue's retry/drop handling.
    """
    app = current_app._get_current_object()

    def run():
        with app.app_context():
            func(*args, **kwargs)

    run.__name__ = getattr(func, '__name__', 'notification')
    app.extensions['task_queue'].enqueue(run)
