# File: notification_helper.py
"""Sends notifications for the CatCare integration.

Triage persistence failures are surfaced without blocking the user: a
persistent notification is always created, and the configured notify
service (HA Companion app, etc.) is called when one is set. The daily care
reminder lists the rounds still open at the configured hour.
"""

from __future__ import annotations

from typing import Any

from homeassistant.components import persistent_notification
from homeassistant.core import HomeAssistant

from . import const


async def async_send_notification(
    hass: HomeAssistant,
    notify_service: str,
    title: str,
    message: str,
    extra_data: dict[str, str] | None = None,
) -> None:
    """Send a notification using the specified notify service.

    Missing services are logged and skipped instead of raising.
    """
    if const.DISPLAY_DOT not in notify_service:
        domain = const.NOTIFY_DOMAIN
        service = notify_service
    else:
        domain, service = notify_service.split(const.DISPLAY_DOT, 1)

    if not hass.services.has_service(domain, service):
        const.LOGGER.warning(
            "Notification service '%s.%s' not available - skipping notification",
            domain,
            service,
        )
        return

    payload: dict[str, Any] = {const.NOTIFY_TITLE: title, const.NOTIFY_MESSAGE: message}
    if extra_data:
        payload[const.NOTIFY_DATA] = extra_data

    try:
        await hass.services.async_call(domain, service, payload, blocking=True)
        const.LOGGER.debug("Notification sent via '%s.%s'", domain, service)

    except Exception as err:  # pylint: disable=broad-exception-caught
        # Broad exception allowed: a failing notify integration must not turn a
        # non-blocking error report into an uncaught exception.
        const.LOGGER.error(
            "Unexpected error sending notification via '%s.%s': %s",
            domain,
            service,
            err,
        )


async def async_notify_triage_error(
    hass: HomeAssistant,
    notify_service: str | None,
    item_title: str,
    error: str,
) -> None:
    """Report a triage write that could not be saved."""
    message = f"{item_title}: {error}"
    persistent_notification.async_create(
        hass,
        message,
        title=const.NOTIFICATION_TITLE_TRIAGE_ERROR,
        notification_id=const.NOTIFICATION_ID_TRIAGE_ERROR,
    )
    if notify_service:
        await async_send_notification(
            hass, notify_service, const.NOTIFICATION_TITLE_TRIAGE_ERROR, message
        )


def format_care_reminder(labels: list[str]) -> str:
    """Return the reminder body for outstanding care labels."""
    shown = ", ".join(labels[: const.REMINDER_MAX_LABELS])
    hidden = len(labels) - const.REMINDER_MAX_LABELS
    if hidden > 0:
        shown = const.LABEL_REMINDER_MORE_FMT.format(labels=shown, count=hidden)
    return const.LABEL_REMINDER_BODY_FMT.format(labels=shown)


async def async_notify_care_reminder(
    hass: HomeAssistant,
    notify_service: str | None,
    labels: list[str],
) -> None:
    """Remind the household about care that is still open.

    Goes to the notify service when one is configured, otherwise to a
    persistent notification that replaces the previous reminder.
    """
    message = format_care_reminder(labels)
    if notify_service:
        await async_send_notification(
            hass, notify_service, const.NOTIFICATION_TITLE_CARE_REMINDER, message
        )
        return
    persistent_notification.async_create(
        hass,
        message,
        title=const.NOTIFICATION_TITLE_CARE_REMINDER,
        notification_id=const.NOTIFICATION_ID_CARE_REMINDER,
    )
