"""Capability dispatch — turn a resource handler into routes.

``resource_routes()`` probes the handler once and builds one endpoint
closure per capability it implements. Each endpoint is a linear
pipeline: read the path id, decode the form when writing, call the
capability method, write the result. Errors propagate to the ASGI
handler, which writes every failure in one place.

=========  ==================  ===================================
Method     Path                Capability
=========  ==================  ===================================
GET        ``/{path}/{id}``    ``get_resource``
GET        ``/{path}``         ``list_resource``
POST, PUT  ``/{path}``         ``create_resource``
POST       ``/{path}/{id}``    ``get_resource`` + ``update_resource``
DELETE     ``/{path}/{id}``    ``get_resource`` + ``delete_resource``
=========  ==================  ===================================
"""

from reason._internal.invoke import invoke
from reason.decoding import decode_form
from reason.http.request import Request
from reason.http.response import Response
from reason.resource import Capabilities, capabilities_of
from reason.routing.route import Route
from reason.schema import FieldCache
from reason.server.writer import write_empty, write_resource, write_resource_list

ID_PARAM = "id"


def collection_path(resource_path: str) -> str:
    """``"books"`` / ``"/books/"`` -> ``"/books"``."""
    return "/" + resource_path.strip("/")


def member_path(resource_path: str) -> str:
    """``"books"`` -> ``"/books/{id}"``."""
    return collection_path(resource_path).rstrip("/") + "/{" + ID_PARAM + "}"


def resource_routes(
    schema: type,
    handler: object,
    resource_path: str,
    cache: FieldCache,
    *,
    capabilities: Capabilities | None = None,
) -> list[Route]:
    """Build the routes for every capability *handler* implements.

    Args:
        schema: Dataclass decoded from the form on create and update.
        handler: The resource handler.
        resource_path: Path segment the resource lives under.
        cache: Field descriptor cache shared by decoding and encoding.
        capabilities: Pre-computed probe result; probed here if omitted.

    Returns:
        The routes, empty if the handler implements no capability.
    """
    caps = capabilities if capabilities is not None else capabilities_of(handler)
    collection = collection_path(resource_path)
    member = member_path(resource_path)
    name = resource_path.strip("/") or "root"
    routes: list[Route] = []

    if (getter := caps.getter) is not None:

        async def get_one(request: Request) -> Response:
            resource = await invoke(getter.get_resource, request.path_params[ID_PARAM])
            return write_resource(resource, cache)

        routes.append(Route(member, get_one, frozenset({"GET"}), name=f"{name}.get"))

    if (lister := caps.lister) is not None:

        async def list_all(request: Request) -> Response:  # noqa: ARG001
            resources = await invoke(lister.list_resource)
            return write_resource_list(resources, cache)

        routes.append(Route(collection, list_all, frozenset({"GET"}), name=f"{name}.list"))

    if (creator := caps.creator) is not None:

        async def create(request: Request) -> Response:
            data = await decode_form(request, schema, cache)
            resource = await invoke(creator.create_resource, data)
            return write_resource(resource, cache, status=201)

        routes.append(
            Route(collection, create, frozenset({"POST", "PUT"}), name=f"{name}.create")
        )

    if (updater := caps.updater) is not None:

        async def update(request: Request) -> Response:
            existing = await invoke(updater.get_resource, request.path_params[ID_PARAM])
            data = await decode_form(request, schema, cache)
            resource = await invoke(updater.update_resource, existing, data)
            return write_resource(resource, cache)

        routes.append(Route(member, update, frozenset({"POST"}), name=f"{name}.update"))

    if (deleter := caps.deleter) is not None:

        async def delete(request: Request) -> Response:
            existing = await invoke(deleter.get_resource, request.path_params[ID_PARAM])
            await invoke(deleter.delete_resource, existing)
            return write_empty(200)

        routes.append(Route(member, delete, frozenset({"DELETE"}), name=f"{name}.delete"))

    return routes
