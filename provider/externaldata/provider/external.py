import dataclasses
import logging

from . import errors, sources
from .models import v1alpha1 as api
from .utils import json_equal


logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen = True)
class ExternalObservation:
    """
    The result of observing a data source.
    """
    #: Indicates whether a value has previously been recorded for the data source
    resource_exists: bool = False
    #: Indicates whether the recorded value matches the current value at the source
    resource_up_to_date: bool = False


def check_kind(obj) -> api.DataSource:
    if not isinstance(obj, api.DataSource):
        raise errors.NotThisResourceKind(obj)
    return obj


class External:
    """
    Observes data sources and records the data from their sources in their status.

    An instance is bound to the session for a single reconciliation. It is also an async
    context manager that releases the session on exit.
    """
    def __init__(self, session: sources.Session):
        self.session = session

    async def _lookup(self, instance: api.DataSource, context: str):
        """
        Returns the current value at the source of the data source, wrapping any error
        with the given context.
        """
        params = instance.spec.for_provider
        try:
            return await sources.lookup(params.type, params, self.session)
        except errors.FetchError as exc:
            raise errors.ReconcileError(context, exc) from exc

    async def _refresh(self, instance: api.DataSource, context: str):
        """
        Replaces the recorded value of the data source with the current value at the source.

        If the lookup fails, the recorded value is kept only if it was read using the
        current parameters.
        """
        params = instance.spec.for_provider
        try:
            value = await self._lookup(instance, context)
        except errors.ReconcileError:
            if instance.status.discard_stale(params):
                logger.info(
                    "Discarded value read with previous parameters for data source '%s'",
                    instance.metadata.name
                )
            raise
        instance.status.record(params, value)
        logger.info("Recorded value for data source '%s'", instance.metadata.name)

    async def observe(self, obj) -> ExternalObservation:
        """
        Compares the recorded value of the data source with the value at the source.

        The status of the data source is not modified.
        """
        instance = check_kind(obj)
        # A data source that is being deleted is reported as not existing so that it is
        # deleted rather than refreshed
        if instance.deletion_requested:
            return ExternalObservation(resource_exists = False)
        value = await self._lookup(instance, "cannot observe datasource")
        # A value read with different parameters is treated as never having been recorded
        recorded = instance.status.recorded_value(instance.spec.for_provider)
        observation = ExternalObservation(
            resource_exists = recorded is not None,
            resource_up_to_date = json_equal(recorded, value)
        )
        logger.debug(
            "Observed data source '%s' (exists: %s, up to date: %s)",
            instance.metadata.name,
            observation.resource_exists,
            observation.resource_up_to_date
        )
        return observation

    async def create(self, obj):
        """
        Records the value at the source for a data source that has no recorded value.
        """
        await self._refresh(check_kind(obj), "cannot create datasource")

    async def update(self, obj):
        """
        Replaces the recorded value for a data source whose source has changed.
        """
        await self._refresh(check_kind(obj), "cannot update datasource")

    async def delete(self, obj):
        """
        Clears the recorded value for a data source.

        There is nothing to remove at the source, so this always succeeds.
        """
        instance = check_kind(obj)
        instance.status.clear()
        logger.info("Cleared value for data source '%s'", instance.metadata.name)

    async def aclose(self):
        """
        Release the session that the client is bound to.
        """
        await self.session.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()
