from dataclasses import dataclass, field
from typing import Optional

from stylash.config import AppConfig, settings
from stylash.engine.lifecycle import BookingLifecycleManager
from stylash.engine.overbooking import OverbookingCheck, OverbookingPolicy
from stylash.engine.policy import PolicySettingsService
from stylash.engine.reporting import BookingReporter, BookingStats
from stylash.engine.scheduler import TIME_SLOTS, Scheduler
from stylash.engine.state_machine import BookingAction, BookingStateMachine
from stylash.storage.kv_store import KeyValueStore
from stylash.storage.repository import BookingRepository, SettingsRepository, build_store
from stylash.tools.audit import AuditLog
from stylash.utils import Clock, utc_now


@dataclass
class BookingEngine:
    """Wires the scheduler, lifecycle, policy, and reporting over one store."""

    scheduler: Scheduler
    lifecycle: BookingLifecycleManager
    policy: PolicySettingsService
    overbooking: OverbookingPolicy
    reporting: BookingReporter
    audit: AuditLog = field(default_factory=AuditLog)

    @classmethod
    def create(
        cls,
        store: Optional[KeyValueStore] = None,
        config: AppConfig = settings,
        clock: Clock = utc_now,
        audit: Optional[AuditLog] = None,
    ) -> "BookingEngine":
        store = store if store is not None else build_store(config)
        audit = audit if audit is not None else AuditLog(
            limit=config.engine.audit_log_limit, clock=clock
        )
        bookings = BookingRepository(store)
        policy_repo = SettingsRepository(store)
        tz = config.business.timezone

        scheduler = Scheduler(bookings, policy_repo, clock=clock, timezone=tz)
        overbooking = OverbookingPolicy(bookings, policy_repo)
        return cls(
            scheduler=scheduler,
            lifecycle=BookingLifecycleManager(
                bookings, scheduler, overbooking, audit, clock=clock, config=config.engine
            ),
            policy=PolicySettingsService(policy_repo, audit),
            overbooking=overbooking,
            reporting=BookingReporter(bookings, clock=clock, timezone=tz),
            audit=audit,
        )


__all__ = [
    "BookingEngine",
    "BookingLifecycleManager",
    "Scheduler",
    "TIME_SLOTS",
    "OverbookingPolicy",
    "OverbookingCheck",
    "PolicySettingsService",
    "BookingReporter",
    "BookingStats",
    "BookingStateMachine",
    "BookingAction",
]
