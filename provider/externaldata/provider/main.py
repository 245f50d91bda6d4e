import asyncio
import functools
import logging
import sys

import kopf

import pydantic

from easykube import Configuration, ApiError
from kube_custom_resource import CustomResourceRegistry

from . import errors, managed, models
from .config import settings
from .connector import Connector
from .models import v1alpha1 as api


logger = logging.getLogger(__name__)


# Create an easykube client from the environment
ekclient = Configuration.from_environment().async_client(
    default_field_manager = settings.easykube_field_manager
)


# Create a registry of custom resources and populate it from the models module
registry = CustomResourceRegistry(settings.api_group, settings.crd_categories)
registry.discover_models(models)


# The connector that binds data sources to their provider configs
connector = Connector(ekclient)


@kopf.on.startup()
async def on_startup(**kwargs):
    """
    Runs on operator startup.
    """
    settings.logging.apply()
    kopf_settings = kwargs["settings"]
    kopf_settings.persistence.finalizer = f"{settings.api_group}/finalizer"
    kopf_settings.persistence.progress_storage = kopf.AnnotationsProgressStorage(
        prefix = settings.api_group
    )
    kopf_settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage(
        prefix = settings.api_group,
        key = "last-handled-configuration",
    )
    try:
        for crd in registry:
            await ekclient.apply_object(crd.kubernetes_resource(), force = True)
    except Exception:
        logger.exception("error applying CRDs - exiting")
        sys.exit(1)


@kopf.on.cleanup()
async def on_cleanup(**kwargs):
    """
    Runs on operator shutdown.
    """
    await ekclient.aclose()


async def ekresource_for_model(model, subresource = None):
    """
    Returns an easykube resource for the given model.
    """
    api = ekclient.api(f"{settings.api_group}/{model._meta.version}")
    resource = model._meta.plural_name
    if subresource:
        resource = f"{resource}/{subresource}"
    return await api.resource(resource)


async def save_instance_status(instance):
    """
    Save the status of the given instance.
    """
    ekresource = await ekresource_for_model(instance, "status")
    data = await ekresource.replace(
        instance.metadata.name,
        {
            # Include the resource version for optimistic concurrency
            "metadata": { "resourceVersion": instance.metadata.resource_version },
            "status": instance.status.model_dump(
                by_alias = True,
                exclude_defaults = True,
                mode = "json"
            ),
        },
        namespace = instance.metadata.namespace
    )
    # Store the new resource version
    instance.metadata.resource_version = data["metadata"]["resourceVersion"]


def model_handler(model, register_fn, /, **kwargs):
    """
    Decorator that registers a handler with kopf for the specified model.
    """
    api_version = f"{settings.api_group}/{model._meta.version}"
    def decorator(func):
        @functools.wraps(func)
        async def handler(**handler_kwargs):
            if "instance" not in handler_kwargs:
                try:
                    handler_kwargs["instance"] = model.model_validate(handler_kwargs["body"])
                except pydantic.ValidationError as exc:
                    raise kopf.PermanentError(str(exc))
            try:
                return await func(**handler_kwargs)
            except ApiError as exc:
                if exc.status_code == 409:
                    # When a handler fails with a 409, we want to retry quickly
                    raise kopf.TemporaryError(str(exc), delay = 5)
                else:
                    raise
        return register_fn(api_version, model._meta.plural_name, **kwargs)(handler)
    return decorator


async def reconcile_instance(instance):
    """
    Reconciles the given data source and saves the resulting status.

    Failures are saved in the status before being passed to kopf for a retry.
    """
    try:
        outcome = await asyncio.wait_for(
            managed.reconcile(connector, instance),
            settings.reconcile_timeout
        )
    except asyncio.TimeoutError:
        message = f"reconciliation timed out after {settings.reconcile_timeout}s"
        managed.record_failure(instance, message)
        await save_instance_status(instance)
        raise kopf.TemporaryError(message)
    except errors.Error as exc:
        await save_instance_status(instance)
        raise kopf.TemporaryError(str(exc))
    await save_instance_status(instance)
    return outcome


@model_handler(api.DataSource, kopf.on.create)
@model_handler(api.DataSource, kopf.on.update, field = "spec")
@model_handler(api.DataSource, kopf.on.resume)
async def datasource_changed(instance, **kwargs):
    """
    Executes when a data source is created or the spec of a data source is updated.

    It also runs for each data source when the operator is resumed.
    """
    await reconcile_instance(instance)


@model_handler(api.DataSource, kopf.timer, interval = settings.poll_interval)
async def datasource_poll(instance, **kwargs):
    """
    Executes periodically for each data source to pick up changes at the source.
    """
    # Deletion is handled by the delete handler
    if not instance.deletion_requested:
        await reconcile_instance(instance)


@model_handler(api.DataSource, kopf.on.delete)
async def datasource_deleted(instance, **kwargs):
    """
    Executes when a data source is deleted.
    """
    await reconcile_instance(instance)
    # The data source no longer needs its provider config
    await connector.usage.untrack(instance)
