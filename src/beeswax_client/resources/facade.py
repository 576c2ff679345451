"""CRUD operations bound to one Beeswax resource type.

Create and edit are two-phase: the mutation response is not trusted as
the canonical record, so the record is fetched again by id once the
mutation succeeds.
"""

import logging
from typing import Any, Dict, Optional

from ..exceptions import ApplicationError, StatusCodeError
from ..models import FailureKind, ResourceDescriptor, Result
from ..utils.errors import ErrorClassifier
from ..utils.http import RequestDispatcher
from .pagination import query_all

logger = logging.getLogger(__name__)

EMPTY_BODY_MESSAGE = "Body must be non-empty object"


def is_non_empty_record(body: Any) -> bool:
    """Return whether ``body`` is a non-empty plain dictionary."""
    return isinstance(body, dict) and len(body) > 0


def _empty_body_failure() -> Result:
    return Result.fail(400, EMPTY_BODY_MESSAGE, FailureKind.VALIDATION)


class ResourceClient:
    """find/query/query_all/create/edit/put_edit/delete for one resource.

    :param dispatcher: Dispatcher shared by the whole client
    :type dispatcher: RequestDispatcher
    :param descriptor: The resource this client is bound to
    :type descriptor: ResourceDescriptor
    :param classifier: Classifier for failed edits and deletes
    :type classifier: ErrorClassifier
    """

    def __init__(
        self,
        dispatcher: RequestDispatcher,
        descriptor: ResourceDescriptor,
        classifier: Optional[ErrorClassifier] = None,
    ):
        self._dispatcher = dispatcher
        self.descriptor = descriptor
        self._classifier = classifier or ErrorClassifier()

    def __repr__(self) -> str:
        return f"<ResourceClient {self.descriptor.name} {self.descriptor.endpoint}>"

    @property
    def endpoint(self) -> str:
        return self.descriptor.endpoint

    @property
    def id_field(self) -> str:
        return self.descriptor.id_field

    async def find(self, resource_id: Any) -> Result:
        """Fetch one record by id.

        :param resource_id: Record identifier
        :return: Successful result wrapping the response body
        :rtype: Result
        """
        body = await self._dispatcher.dispatch(
            "GET", self.descriptor.item_path(resource_id)
        )
        return Result.ok(body)

    async def query(self, filters: Optional[Dict[str, Any]] = None) -> Result:
        """Fetch records matching ``filters`` (a single page).

        :param filters: Query filters sent as query parameters
        :return: Successful result wrapping the response body
        :rtype: Result
        """
        body = await self._dispatcher.dispatch("GET", self.endpoint, filters or {})
        return Result.ok(body)

    async def query_all(self, filters: Optional[Dict[str, Any]] = None) -> Result:
        """Fetch every record matching ``filters``, page by page.

        :param filters: Query filters sent as query parameters
        :return: Successful result with the list of all records
        :rtype: Result
        """
        return await query_all(self._dispatcher, self.endpoint, self.id_field, filters)

    async def create(self, body: Optional[Dict[str, Any]]) -> Result:
        """Create a record and return it as stored by Beeswax.

        An empty or non-dict body is rejected locally; Beeswax answers
        such bodies with a misleading 401.

        :param body: Record fields
        :return: Result wrapping the freshly fetched record
        :rtype: Result
        """
        if not is_non_empty_record(body):
            return _empty_body_failure()

        created = await self._dispatcher.dispatch("POST", self.endpoint, body)
        new_id = _created_id(created)
        logger.info(f"Created {self.descriptor.name} record {new_id}")
        return await self.find(new_id)

    async def edit(
        self,
        resource_id: Any,
        body: Optional[Dict[str, Any]],
        fail_on_not_found: bool = False,
    ) -> Result:
        """Partially update a record (PATCH) and return it as stored.

        A status error from the PATCH or from the re-fetch goes through
        the update classifier.

        :param resource_id: Record identifier
        :param body: Fields to change
        :param fail_on_not_found: Raise instead of returning "Not found"
        :return: Result wrapping the fetched record, or a soft failure
        :rtype: Result
        """
        return await self._update("PATCH", resource_id, body, fail_on_not_found)

    async def put_edit(
        self,
        resource_id: Any,
        body: Optional[Dict[str, Any]],
        fail_on_not_found: bool = False,
    ) -> Result:
        """Replace a record (PUT) and return it as stored.

        :param resource_id: Record identifier
        :param body: Full record
        :param fail_on_not_found: Raise instead of returning "Not found"
        :return: Result wrapping the fetched record, or a soft failure
        :rtype: Result
        """
        return await self._update("PUT", resource_id, body, fail_on_not_found)

    async def delete(self, resource_id: Any, fail_on_not_found: bool = False) -> Result:
        """Delete a record.

        :param resource_id: Record identifier
        :param fail_on_not_found: Raise instead of returning "Not found"
        :return: Result wrapping the response body, or a soft failure
        :rtype: Result
        """
        try:
            body = await self._dispatcher.dispatch(
                "DELETE", self.descriptor.item_path(resource_id)
            )
        except StatusCodeError as e:
            return self._classifier.classify_delete(e, fail_on_not_found)
        return Result.ok(body)

    async def _update(
        self,
        method: str,
        resource_id: Any,
        body: Optional[Dict[str, Any]],
        fail_on_not_found: bool,
    ) -> Result:
        if not is_non_empty_record(body):
            return _empty_body_failure()

        # The re-fetch is classified like the mutation itself
        try:
            await self._dispatcher.dispatch(
                method, self.descriptor.item_path(resource_id), body
            )
            return await self.find(resource_id)
        except StatusCodeError as e:
            return self._classifier.classify_update(e, fail_on_not_found)


def _created_id(created: Any) -> Any:
    """Extract the new record id from a creation response.

    Beeswax returns it either at the top level or nested in ``payload``.
    """
    if isinstance(created, dict):
        if created.get("id") is not None:
            return created["id"]
        payload = created.get("payload")
        if isinstance(payload, dict) and payload.get("id") is not None:
            return payload["id"]
        if isinstance(payload, list) and payload and isinstance(payload[0], dict):
            if payload[0].get("id") is not None:
                return payload[0]["id"]
    raise ApplicationError(created, method="POST")
