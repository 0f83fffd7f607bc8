"""Read and update the availability and overbooking policy singletons."""

import logging

from stylash.schemas.settings_schema import AvailabilitySettings, OverbookingSettings
from stylash.storage.repository import SettingsRepository
from stylash.tools.audit import AuditAction, AuditLog

logger = logging.getLogger(__name__)


class PolicySettingsService:
    """Admin-facing access to the policy singletons; every update is audited."""

    def __init__(self, repository: SettingsRepository, audit: AuditLog) -> None:
        self.repository = repository
        self.audit = audit

    def get_availability_settings(self) -> AvailabilitySettings:
        return self.repository.get_availability()

    def update_availability_settings(self, availability: AvailabilitySettings) -> None:
        availability = AvailabilitySettings.model_validate(availability)
        self.repository.save_availability(availability)
        self.audit.log_admin_action(
            AuditAction.UPDATE_AVAILABILITY, availability.model_dump(mode="json")
        )
        logger.info(
            "Availability updated: %d blocked date(s), lead time %d day(s), %d per slot",
            len(availability.blocked_dates),
            availability.lead_time_days,
            availability.max_bookings_per_slot,
        )

    def get_overbooking_settings(self) -> OverbookingSettings:
        return self.repository.get_overbooking()

    def update_overbooking_settings(self, overbooking: OverbookingSettings) -> None:
        overbooking = OverbookingSettings.model_validate(overbooking)
        self.repository.save_overbooking(overbooking)
        self.audit.log_admin_action(
            AuditAction.UPDATE_OVERBOOKING_SETTINGS, overbooking.model_dump(mode="json")
        )
        logger.info("Overbooking settings updated (enabled=%s)", overbooking.enabled)
