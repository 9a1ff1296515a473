"""Host-side coordination of output transactions."""

from oss_output.engine.coordinator import TransactionCoordinator

__all__ = ["TransactionCoordinator"]
