"""Endpoint and enum catalogs extracted from a document.

Endpoints are mainly read to discover which named schemas a document actually
uses: converting an operation's parameters, body and responses registers every
schema they reach.
"""

import logging
from collections.abc import Iterator, Mapping
from typing import Any, Literal

from zodforge.conversion import ConversionContext, convert_with_chain
from zodforge.models import ZodforgeBaseModel
from zodforge.schema.models import parse_schema
from zodforge.schema.naming import normalize_identifier, path_to_variable_name, to_colon_path
from zodforge.schema.resolver import SchemaResolver

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

PARAMETER_LOCATIONS = {"path": "Path", "query": "Query", "header": "Header", "cookie": "Cookie"}

ParameterLocation = Literal["Path", "Query", "Header", "Cookie", "Body"]


class EndpointParameterModel(ZodforgeBaseModel):
    """One operation parameter or request body.

    Attributes:
        name: Parameter name (``body`` for request bodies)
        location: Where the value travels
        required: Whether the parameter is required
        schema_expression: Validator expression including its chain
        description: Parameter description, if any
    """

    name: str
    location: ParameterLocation
    required: bool
    schema_expression: str
    description: str | None = None


class EndpointErrorModel(ZodforgeBaseModel):
    """A non-success response of an operation."""

    status: str
    schema_expression: str
    description: str | None = None


class EndpointDefinitionModel(ZodforgeBaseModel):
    """One HTTP operation.

    Attributes:
        method: Lower-case HTTP method
        path: Path with ``:param`` placeholders
        alias: Identifier for the operation (operationId or method + path)
        description: Operation summary or description
        request_format: Media type of the request body, if any
        parameters: Path/query/header/cookie parameters and the body
        response: Validator expression of the main success response
        errors: Non-success responses
    """

    method: str
    path: str
    alias: str
    description: str | None = None
    request_format: str | None = None
    parameters: list[EndpointParameterModel]
    response: str
    errors: list[EndpointErrorModel]


class EnumEntryModel(ZodforgeBaseModel):
    """A named enum found in the document.

    Attributes:
        name: Canonical name of the enum
        kind: Declared kind of the enum values
        values: The allowed values, in declaration order
        source: Reference or location the enum was found at
    """

    name: str
    kind: str | None = None
    values: list[Any]
    source: str


def operation_alias(method: str, path: str, operation: Mapping[str, Any]) -> str:
    """Identifier for an operation: its operationId, else method plus path."""
    operation_id = operation.get("operationId")
    if operation_id:
        return normalize_identifier(str(operation_id))
    return normalize_identifier(method + path_to_variable_name(path))


def _deref(resolver: SchemaResolver, value: Any) -> Any:
    seen: set[str] = set()
    while isinstance(value, Mapping) and "$ref" in value and value["$ref"] not in seen:
        seen.add(value["$ref"])
        value = resolver.get_raw_by_ref(value["$ref"])
    return value


def _pick_media(content: Mapping[str, Any] | None) -> tuple[str | None, Any]:
    """Prefer JSON-like media types, then whatever comes first."""
    if not content:
        return None, None
    for media_type, media in content.items():
        if "json" in media_type or media_type == "*/*":
            return media_type, (media or {}).get("schema")
    media_type, media = next(iter(content.items()))
    return media_type, (media or {}).get("schema")


def _merged_parameters(
    resolver: SchemaResolver, path_item: Mapping[str, Any], operation: Mapping[str, Any]
) -> list[Mapping[str, Any]]:
    merged: dict[tuple[str, str], Mapping[str, Any]] = {}
    for raw in [*path_item.get("parameters", []), *operation.get("parameters", [])]:
        parameter = _deref(resolver, raw)
        merged[(parameter.get("name", ""), parameter.get("in", ""))] = parameter
    return list(merged.values())


def _convert_parameter(
    ctx: ConversionContext, parameter: Mapping[str, Any]
) -> EndpointParameterModel | None:
    location = PARAMETER_LOCATIONS.get(parameter.get("in", ""))
    if location is None:
        logger.warning(f"Skipping parameter {parameter.get('name')} with unknown location")
        return None

    schema = parameter.get("schema")
    if schema is None:
        _, schema = _pick_media(parameter.get("content"))

    required = bool(parameter.get("required", location == "Path"))
    _, expression = convert_with_chain(schema if schema is not None else {}, ctx, required)
    return EndpointParameterModel(
        name=parameter["name"],
        location=location,  # type: ignore[arg-type]
        required=required,
        schema_expression=expression,
        description=parameter.get("description"),
    )


def _response_expression(ctx: ConversionContext, response: Mapping[str, Any]) -> str:
    _, schema = _pick_media(response.get("content"))
    if schema is None:
        return "z.void()"
    return convert_with_chain(schema, ctx, True)[1]


def _extract_endpoint(
    ctx: ConversionContext,
    method: str,
    path: str,
    path_item: Mapping[str, Any],
    operation: Mapping[str, Any],
) -> EndpointDefinitionModel:
    resolver = ctx.resolver
    parameters: list[EndpointParameterModel] = []
    for parameter in _merged_parameters(resolver, path_item, operation):
        converted = _convert_parameter(ctx, parameter)
        if converted is not None:
            parameters.append(converted)

    request_format = None
    if "requestBody" in operation:
        body = _deref(resolver, operation["requestBody"])
        request_format, schema = _pick_media(body.get("content"))
        if schema is not None:
            required = bool(body.get("required", False))
            _, expression = convert_with_chain(schema, ctx, required)
            parameters.append(
                EndpointParameterModel(
                    name="body",
                    location="Body",
                    required=required,
                    schema_expression=expression,
                    description=body.get("description"),
                )
            )

    response = None
    errors: list[EndpointErrorModel] = []
    for status, raw_response in (operation.get("responses") or {}).items():
        status = str(status)
        resolved = _deref(resolver, raw_response) or {}
        expression = _response_expression(ctx, resolved)
        if status.startswith("2") and response is None:
            response = expression
        elif not status.startswith("2"):
            errors.append(
                EndpointErrorModel(
                    status=status,
                    schema_expression=expression,
                    description=resolved.get("description"),
                )
            )

    return EndpointDefinitionModel(
        method=method,
        path=to_colon_path(path),
        alias=operation_alias(method, path, operation),
        description=operation.get("summary") or operation.get("description"),
        request_format=request_format,
        parameters=parameters,
        response=response or "z.void()",
        errors=errors,
    )


def iter_operations(
    document: Mapping[str, Any],
) -> Iterator[tuple[str, str, Mapping[str, Any], Mapping[str, Any]]]:
    """Yield (method, path, path item, operation) for every operation."""
    for path, path_item in (document.get("paths") or {}).items():
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if isinstance(operation, Mapping):
                yield method, path, path_item, operation


def extract_endpoints(ctx: ConversionContext) -> list[EndpointDefinitionModel]:
    """Extract and convert every operation of the context's document.

    Deprecated operations are skipped unless ``with_deprecated`` is set.

    Args:
        ctx: Conversion context; every schema reached is registered in it

    Returns:
        Endpoint definitions in document order
    """
    endpoints = []
    for method, path, path_item, operation in iter_operations(ctx.resolver.document):
        if operation.get("deprecated") and not ctx.options.with_deprecated:
            logger.debug(f"Skipping deprecated operation {method.upper()} {path}")
            continue
        endpoints.append(_extract_endpoint(ctx, method, path, path_item, operation))
    logger.info(f"Extracted {len(endpoints)} endpoints")
    return endpoints


def collect_enums(resolver: SchemaResolver) -> dict[str, EnumEntryModel]:
    """Collect named enums from component schemas and operation parameters.

    Component schemas with an enum are keyed by their canonical name, enum
    properties of component objects by ``Parent_property``, and inline
    parameter enums by ``operation_parameter``.
    """
    enums: dict[str, EnumEntryModel] = {}

    for ref in resolver.component_schema_refs():
        node, info = resolver.resolve(ref)
        if node.enum is not None:
            enums[info.normalized] = EnumEntryModel(
                name=info.normalized, kind=node.primary_kind, values=node.enum, source=ref
            )
        for prop_name, prop in (node.properties or {}).items():
            if prop.ref is None and prop.enum is not None:
                name = f"{info.normalized}_{normalize_identifier(prop_name)}"
                enums[name] = EnumEntryModel(
                    name=name,
                    kind=prop.primary_kind,
                    values=prop.enum,
                    source=f"{ref}/properties/{prop_name}",
                )

    for method, path, path_item, operation in iter_operations(resolver.document):
        alias = operation_alias(method, path, operation)
        for parameter in _merged_parameters(resolver, path_item, operation):
            schema = parameter.get("schema")
            if not isinstance(schema, Mapping) or "enum" not in schema:
                continue
            node = parse_schema(schema)
            name = f"{alias}_{normalize_identifier(str(parameter.get('name', '')))}"
            enums[name] = EnumEntryModel(
                name=name,
                kind=node.primary_kind,
                values=node.enum or [],
                source=f"paths.{path}.{method}.parameters.{parameter.get('name')}",
            )

    return enums
