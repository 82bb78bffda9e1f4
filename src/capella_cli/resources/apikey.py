"""API key call site: create, read, rotate, delete, import and list."""

from __future__ import annotations

import base64
import uuid

from capella_cli.client.context import CallContext
from capella_cli.client.errors import (
    CapellaError,
    ValidationError,
    check_not_found,
    parse_error,
)
from capella_cli.client.executor import EndpointCfg
from capella_cli.client.pagination import SortBy, get_paginated
from capella_cli.models.apikey import (
    ApiKeyState,
    CreateApiKeyRequest,
    CreateApiKeyResponse,
    GetApiKeyResponse,
    RotateApiKeyRequest,
    RotateApiKeyResponse,
)
from capella_cli.models.common import is_trimmed
from capella_cli.resources.base import CapellaResource, OperationResult, decode
from capella_cli.resources.ids import ID, ORGANIZATION_ID, parse_composite_id, validate_ids

ERROR_AFTER_CREATION = (
    "Api Key creation is successful, but encountered an error while checking the current"
    " state of the api key. Refresh in 1-2 minutes to read the current api key state,"
    " unexpected error: "
)
ERROR_DURING_CREATION = (
    "There is an error during api key creation. Please check in Capella to see if any"
    " hanging resources have been created, unexpected error: "
)


def validate_create_plan(plan: ApiKeyState) -> None:
    """Check the fields a new key needs, raising ValidationError."""
    if not plan.organization_id:
        raise ValidationError("organizationId cannot be empty")
    if not plan.name:
        raise ValidationError("name cannot be empty")
    if plan.organization_roles is None:
        raise ValidationError("organizationRoles cannot be empty")
    if plan.rotate is not None:
        raise ValidationError("rotate value should not be set")
    if plan.secret is not None:
        raise ValidationError("secret should not be set while create operation")
    if not is_trimmed(plan.name):
        raise ValidationError("name should not have leading or trailing spaces")
    if plan.description is not None and not is_trimmed(plan.description):
        raise ValidationError("description should not have leading or trailing spaces")
    for item in plan.resources:
        try:
            uuid.UUID(item.id)
        except ValueError:
            raise ValidationError(f"resource id {item.id!r} is not valid uuid") from None


def encode_token(key_id: str, secret: str) -> str:
    return base64.b64encode(f"{key_id}:{secret}".encode()).decode()


def retain_resources_if_org_owner(desired: ApiKeyState, refreshed: ApiKeyState) -> ApiKeyState:
    """Organization owners see every project, so keep the resources from the plan."""
    if refreshed.is_org_owner:
        refreshed.resources = list(desired.resources)
    return refreshed


class ApiKeyResource(CapellaResource[ApiKeyState]):
    """Organization API keys. Updating a key means rotating its secret."""

    def _path(self, organization_id: str, key_id: str | None = None) -> str:
        path = f"organizations/{organization_id}/apikeys"
        return f"{path}/{key_id}" if key_id else path

    def retrieve(self, ctx: CallContext, organization_id: str, key_id: str) -> ApiKeyState:
        outcome = self.execute(ctx, self._path(organization_id, key_id), "GET", 200)
        return ApiKeyState.from_response(decode(outcome, GetApiKeyResponse), organization_id)

    def list_all(
        self, ctx: CallContext, organization_id: str, sort_by: SortBy | None = SortBy.NAME,
    ) -> list[GetApiKeyResponse]:
        """Every API key of the organization, in server order."""
        cfg = EndpointCfg(url=self.url(self._path(organization_id)))
        return get_paginated(
            ctx, self.conn.executor, self.conn.token, cfg, GetApiKeyResponse, sort_by,
        )

    def create(self, ctx: CallContext, plan: ApiKeyState) -> OperationResult[ApiKeyState]:
        result: OperationResult[ApiKeyState] = OperationResult()
        try:
            validate_create_plan(plan)
        except ValidationError as exc:
            return result.error("Error creating ApiKey", f"Could not create ApiKey, unexpected error: {exc}")

        organization_id = plan.organization_id or ""
        request = CreateApiKeyRequest(
            name=plan.name or "",
            description=plan.description,
            expiry=plan.expiry,
            organization_roles=plan.organization_roles or [],
            resources=plan.resources,
            allowed_cidrs=plan.allowed_cidrs,
        )
        try:
            outcome = self.execute(ctx, self._path(organization_id), "POST", 201, request)
            created = decode(outcome, CreateApiKeyResponse)
        except CapellaError as exc:
            return result.error("Error creating ApiKey", ERROR_DURING_CREATION + parse_error(exc))

        # Computed fields stay empty until the refresh below fills them.
        result.state = plan.model_copy(update={"id": created.id, "token": created.token, "audit": None})
        try:
            refreshed = self.retrieve(ctx, organization_id, created.id)
        except CapellaError as exc:
            result.diagnostics.add_warning("Error creating ApiKey", ERROR_AFTER_CREATION + parse_error(exc))
            return result

        refreshed.token = created.token
        result.state = retain_resources_if_org_owner(plan, refreshed)
        return result

    def read(self, ctx: CallContext, state: ApiKeyState) -> OperationResult[ApiKeyState]:
        result: OperationResult[ApiKeyState] = OperationResult()
        try:
            ids = validate_ids({ORGANIZATION_ID: state.organization_id, ID: state.id})
        except ValidationError as exc:
            return result.error(
                "Error reading api key", f"Could not read api key id {state.id}, unexpected error: {exc}",
            )

        try:
            refreshed = self.retrieve(ctx, ids[ORGANIZATION_ID], ids[ID])
        except CapellaError as exc:
            not_found, detail = check_not_found(exc)
            if not_found:
                return result.remove()
            return result.error("Error reading api key", f"Could not read api key id {ids[ID]}: {detail}")

        refreshed.token = state.token
        refreshed.rotate = state.rotate
        refreshed.secret = state.secret
        result.state = retain_resources_if_org_owner(state, refreshed)
        return result

    def update(
        self, ctx: CallContext, plan: ApiKeyState, state: ApiKeyState,
    ) -> OperationResult[ApiKeyState]:
        """Rotate the key. ``plan.rotate`` must be set and greater than ``state.rotate``."""
        result: OperationResult[ApiKeyState] = OperationResult()
        try:
            ids = validate_ids({ORGANIZATION_ID: state.organization_id, ID: state.id})
        except ValidationError as exc:
            return result.error(
                "Error rotating api key", f"Could not rotate api key id {state.id}, unexpected error: {exc}",
            )
        organization_id, key_id = ids[ORGANIZATION_ID], ids[ID]

        if plan.rotate is None:
            return result.error(
                "Error rotating api key", f"Could not rotate api key id {key_id}: rotate value is not set",
            )
        if state.rotate is not None and plan.rotate <= state.rotate:
            return result.error(
                "Error rotating api key",
                f"Could not rotate api key id {key_id}: plan rotate value is not greater than state rotate value",
            )

        try:
            outcome = self.execute(
                ctx, f"{self._path(organization_id, key_id)}/rotate", "POST", 201,
                RotateApiKeyRequest(secret=plan.secret),
            )
        except CapellaError as exc:
            not_found, detail = check_not_found(exc)
            if not_found:
                return result.remove()
            return result.error("Error rotating api key", f"Could not rotate api key id {key_id}: {detail}")

        try:
            rotated = decode(outcome, RotateApiKeyResponse)
            current = self.retrieve(ctx, organization_id, key_id)
        except CapellaError as exc:
            return result.error(
                "Error rotating api key", f"Could not rotate api key id {key_id}: {parse_error(exc)}",
            )

        current.secret = rotated.secret_key
        current.token = encode_token(key_id, rotated.secret_key)
        current.rotate = plan.rotate
        result.state = retain_resources_if_org_owner(plan, current)
        return result

    def delete(self, ctx: CallContext, state: ApiKeyState) -> OperationResult[ApiKeyState]:
        result: OperationResult[ApiKeyState] = OperationResult()
        try:
            ids = validate_ids({ORGANIZATION_ID: state.organization_id, ID: state.id})
        except ValidationError as exc:
            return result.error(
                "Error deleting api key", f"Could not delete api key id {state.id}, unexpected error: {exc}",
            )
        try:
            self.execute(ctx, self._path(ids[ORGANIZATION_ID], ids[ID]), "DELETE", 204)
        except CapellaError as exc:
            not_found, detail = check_not_found(exc)
            if not_found:
                return result.remove()
            return result.error(
                "Error deleting api key", f"Could not delete api key id {ids[ID]}, unexpected error: {detail}",
            )
        result.removed = True
        return result

    def import_state(self, ctx: CallContext, import_id: str) -> OperationResult[ApiKeyState]:
        """Adopt an existing key from ``organization_id=<id>,id=<id>``."""
        try:
            ids = parse_composite_id(import_id, [ORGANIZATION_ID, ID])
        except ValidationError as exc:
            return OperationResult().error("Error importing api key", str(exc))
        return self.read(ctx, ApiKeyState(organization_id=ids[ORGANIZATION_ID], id=ids[ID]))

