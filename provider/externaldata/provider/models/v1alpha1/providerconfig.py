import typing as t

from pydantic import Field

from kube_custom_resource import CustomResource, Scope, schema

from .common import Reference


class ProviderConfigSpec(schema.BaseModel):
    """
    Model for the spec of a provider config.
    """
    namespace: schema.constr(pattern = r"^[a-z0-9-]+$") = Field(
        ...,
        description = "The namespace to read config maps from."
    )
    base_url: t.Optional[schema.constr(min_length = 1)] = Field(
        None,
        description = "The base URL against which relative data source URLs are resolved."
    )
    headers: schema.Dict[str, str] = Field(
        default_factory = dict,
        description = (
            "Headers to send with every HTTP request, e.g. for authentication. "
            "The Accept header is always application/json."
        )
    )


class ProviderConfig(
    CustomResource,
    scope = Scope.CLUSTER,
    subresources = {"status": {}},
    printer_columns = [
        {
            "name": "Namespace",
            "type": "string",
            "jsonPath": ".spec.namespace",
        },
        {
            "name": "Base URL",
            "type": "string",
            "jsonPath": ".spec.baseUrl",
        },
    ]
):
    """
    Model for a provider config.
    """
    spec: ProviderConfigSpec = Field(
        ...,
        description = "The specification for the provider config."
    )


class ResourceReference(schema.BaseModel):
    """
    Model for a reference to the resource that is using a provider config.
    """
    api_version: schema.constr(min_length = 1) = Field(
        ...,
        description = "The API version of the resource."
    )
    kind: schema.constr(min_length = 1) = Field(..., description = "The kind of the resource.")
    name: schema.constr(min_length = 1) = Field(..., description = "The name of the resource.")


class ProviderConfigUsageSpec(schema.BaseModel):
    """
    Model for the spec of a provider config usage.
    """
    provider_config_ref: Reference = Field(
        ...,
        description = "The provider config that is in use."
    )
    resource_ref: ResourceReference = Field(
        ...,
        description = "The resource that is using the provider config."
    )


class ProviderConfigUsage(
    CustomResource,
    scope = Scope.CLUSTER,
    subresources = {"status": {}},
    printer_columns = [
        {
            "name": "Config",
            "type": "string",
            "jsonPath": ".spec.providerConfigRef.name",
        },
        {
            "name": "Resource Kind",
            "type": "string",
            "jsonPath": ".spec.resourceRef.kind",
        },
        {
            "name": "Resource Name",
            "type": "string",
            "jsonPath": ".spec.resourceRef.name",
        },
    ]
):
    """
    Model for recording that a resource is using a provider config.
    """
    spec: ProviderConfigUsageSpec = Field(
        ...,
        description = "The specification for the provider config usage."
    )
