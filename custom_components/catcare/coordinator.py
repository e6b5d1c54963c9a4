# File: coordinator.py
"""Coordinator for the CatCare integration.

Owns the store and the managers, and publishes a derived snapshot (business
date, care summary, catch-up list). The snapshot is never stored: it is
recomputed from the stored records and the current time on every refresh,
after every write, and at every slot boundary and business-day start.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.event import async_track_time_change
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator
from homeassistant.util import dt as dt_util

from . import const
from .engines.care_engine import CareEngine, CareSummary
from .engines.catchup_engine import CatchUpEngine, CatchUpResult
from .managers import CareManager, HouseholdManager, TriageManager
from .notification_helper import async_notify_care_reminder
from .store import CatCareStore
from .type_defs import HouseholdSettings
from .utils.dt_utils import clamp_day_start_hour


@dataclass
class CatCareSnapshot:
    """Derived household state at one moment."""

    now: datetime
    business_date: str
    care: CareSummary
    catch_up: CatchUpResult


class CatCareDataCoordinator(DataUpdateCoordinator[CatCareSnapshot]):
    """Coordinator for CatCare integration."""

    config_entry: ConfigEntry

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        store: CatCareStore,
    ) -> None:
        """Initialize the CatCareDataCoordinator."""
        update_interval_minutes = config_entry.options.get(
            const.CONF_UPDATE_INTERVAL, const.DEFAULT_UPDATE_INTERVAL
        )

        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=timedelta(minutes=update_interval_minutes),
        )
        self.store = store
        self.care_manager = CareManager(hass, self)
        self.household_manager = HouseholdManager(hass, self)
        self.triage_manager = TriageManager(
            hass, self, self.care_manager, self.household_manager
        )

    # -------------------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------------------

    @property
    def settings(self) -> HouseholdSettings:
        """Return engine settings from the config entry options."""
        options = self.config_entry.options
        return {
            const.CONF_DAY_START_HOUR: clamp_day_start_hour(
                options.get(const.CONF_DAY_START_HOUR, const.DEFAULT_DAY_START_HOUR)
            ),
            const.CONF_INVENTORY_URGENT_DAYS: options.get(
                const.CONF_INVENTORY_URGENT_DAYS, const.DEFAULT_INVENTORY_URGENT_DAYS
            ),
            const.CONF_INVENTORY_CRITICAL_DAYS: options.get(
                const.CONF_INVENTORY_CRITICAL_DAYS,
                const.DEFAULT_INVENTORY_CRITICAL_DAYS,
            ),
            const.CONF_ENABLE_INCIDENT_ALERTS: options.get(
                const.CONF_ENABLE_INCIDENT_ALERTS, const.DEFAULT_ENABLE_INCIDENT_ALERTS
            ),
            const.CONF_ENABLE_PHOTO_ALERTS: options.get(
                const.CONF_ENABLE_PHOTO_ALERTS, const.DEFAULT_ENABLE_PHOTO_ALERTS
            ),
        }  # type: ignore[return-value]

    @property
    def notify_service(self) -> str | None:
        """Return the notify service for error reports, if configured."""
        return (
            self.config_entry.options.get(
                const.CONF_NOTIFY_SERVICE, const.DEFAULT_NOTIFY_SERVICE
            )
            or None
        )

    @property
    def care_reminder_hour(self) -> int | None:
        """Return the daily reminder hour, or None when reminders are off."""
        options = self.config_entry.options
        if not options.get(
            const.CONF_ENABLE_CARE_REMINDER, const.DEFAULT_ENABLE_CARE_REMINDER
        ):
            return None
        return clamp_day_start_hour(
            options.get(const.CONF_CARE_REMINDER_HOUR, const.DEFAULT_CARE_REMINDER_HOUR)
        )

    # -------------------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------------------

    async def async_setup(self) -> None:
        """Set up managers and the boundary refresh schedule."""
        await self.care_manager.async_setup()
        await self.household_manager.async_setup()
        await self.triage_manager.async_setup()

        for hour in self.refresh_hours():
            self.config_entry.async_on_unload(
                async_track_time_change(
                    self.hass, self._async_handle_boundary, hour=hour, minute=0, second=0
                )
            )
        const.LOGGER.debug(
            "Boundary refreshes scheduled at hours %s", self.refresh_hours()
        )

        reminder_hour = self.care_reminder_hour
        if reminder_hour is not None:
            self.config_entry.async_on_unload(
                async_track_time_change(
                    self.hass,
                    self._async_handle_reminder,
                    hour=reminder_hour,
                    minute=0,
                    second=0,
                )
            )
            const.LOGGER.debug("Care reminder scheduled at %02d:00", reminder_hour)

    def refresh_hours(self) -> list[int]:
        """Return the hours at which outstanding instances change."""
        hours = set(const.SLOT_START_HOURS.values())
        hours.add(self.settings[const.CONF_DAY_START_HOUR])
        return sorted(hours)

    @callback
    def _async_handle_boundary(self, now: datetime) -> None:
        """Recompute when a slot begins or the business day rolls over."""
        const.LOGGER.debug("Slot/day boundary reached at %s", now)
        self.async_refresh_snapshot()

    async def _async_handle_reminder(self, now: datetime) -> None:
        """Send the daily care reminder."""
        await self.async_send_care_reminder()

    async def async_send_care_reminder(self) -> bool:
        """Notify about outstanding care instances.

        Returns:
            True when a reminder was sent, False when everything is done.
        """
        snapshot = self.async_refresh_snapshot()
        labels = [
            f"{instance.label} - {instance.cat_name}"
            if instance.cat_name
            else instance.label
            for instance in snapshot.care.outstanding
        ]
        if not labels:
            const.LOGGER.debug(
                "No open care for %s; reminder skipped", snapshot.business_date
            )
            return False

        await async_notify_care_reminder(self.hass, self.notify_service, labels)
        const.LOGGER.info("Care reminder sent for %s open rounds", len(labels))
        return True

    # -------------------------------------------------------------------------------------
    # Snapshot
    # -------------------------------------------------------------------------------------

    def compute_snapshot(self, now: datetime | None = None) -> CatCareSnapshot:
        """Recompute the derived household state.

        Pure over the stored records, the settings and `now`.
        """
        now = now or dt_util.now()
        data: dict[str, Any] = self.store.data
        settings = self.settings
        cats = list(data[const.DATA_CATS].values())

        care = CareEngine.aggregate(
            data[const.DATA_CARE_TASK_DEFS].values(),
            data[const.DATA_CARE_LOGS],
            settings,
            now,
            cats,
        )
        catch_up = CatchUpEngine.build(
            care,
            now,
            settings,
            cats=cats,
            observations=data[const.DATA_OBSERVATIONS],
            notice_defs=data[const.DATA_NOTICE_DEFS],
            inventory=data[const.DATA_INVENTORY].values(),
            incidents=data[const.DATA_INCIDENTS].values(),
            last_seen_photo_at=data[const.DATA_META].get(
                const.DATA_META_LAST_SEEN_PHOTO_AT
            ),
        )
        return CatCareSnapshot(
            now=now,
            business_date=care.business_date,
            care=care,
            catch_up=catch_up,
        )

    @callback
    def async_refresh_snapshot(self) -> CatCareSnapshot:
        """Recompute now and push the result to listeners."""
        snapshot = self.compute_snapshot()
        self.async_set_updated_data(snapshot)
        return snapshot

    async def _async_update_data(self) -> CatCareSnapshot:
        """Periodic refresh."""
        return self.compute_snapshot()
