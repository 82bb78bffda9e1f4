"""Cluster allowlist call site.

Capella only accepts connections from CIDRs on a cluster's allowlist. Entries
are immutable: changing one means deleting it and adding a new one.
"""

from __future__ import annotations

from capella_cli.client.context import CallContext
from capella_cli.client.errors import CapellaError, ValidationError, check_not_found, parse_error
from capella_cli.client.executor import EndpointCfg
from capella_cli.client.pagination import SortBy, get_paginated
from capella_cli.models.allowlist import AllowListState, CreateAllowListRequest, GetAllowListResponse
from capella_cli.models.common import CreatedResponse
from capella_cli.resources.base import CapellaResource, OperationResult, decode
from capella_cli.resources.ids import (
    CLUSTER_ID,
    ID,
    ORGANIZATION_ID,
    PROJECT_ID,
    parse_composite_id,
    validate_ids,
)

ERROR_AFTER_CREATION = (
    "Allowlist creation is successful, but encountered an error while checking the current"
    " state of the allowlist. Refresh in 1-2 minutes to read the current state,"
    " unexpected error: "
)

_IMPORT_KEYS = [ORGANIZATION_ID, PROJECT_ID, CLUSTER_ID, ID]


def _ids(state: AllowListState) -> dict[str, str]:
    return validate_ids({
        ORGANIZATION_ID: state.organization_id,
        PROJECT_ID: state.project_id,
        CLUSTER_ID: state.cluster_id,
        ID: state.id,
    })


class AllowListResource(CapellaResource[AllowListState]):
    def _path(self, organization_id: str, project_id: str, cluster_id: str, entry_id: str | None = None) -> str:
        path = f"organizations/{organization_id}/projects/{project_id}/clusters/{cluster_id}/allowedcidrs"
        return f"{path}/{entry_id}" if entry_id else path

    def retrieve(
        self, ctx: CallContext, organization_id: str, project_id: str, cluster_id: str, entry_id: str,
    ) -> AllowListState:
        outcome = self.execute(ctx, self._path(organization_id, project_id, cluster_id, entry_id), "GET", 200)
        return AllowListState.from_response(
            decode(outcome, GetAllowListResponse), organization_id, project_id, cluster_id,
        )

    def list_all(
        self,
        ctx: CallContext,
        organization_id: str,
        project_id: str,
        cluster_id: str,
        sort_by: SortBy | None = None,
    ) -> list[GetAllowListResponse]:
        cfg = EndpointCfg(url=self.url(self._path(organization_id, project_id, cluster_id)))
        return get_paginated(
            ctx, self.conn.executor, self.conn.token, cfg, GetAllowListResponse, sort_by,
        )

    def create(self, ctx: CallContext, plan: AllowListState) -> OperationResult[AllowListState]:
        result: OperationResult[AllowListState] = OperationResult()
        parents = {
            ORGANIZATION_ID: plan.organization_id,
            PROJECT_ID: plan.project_id,
            CLUSTER_ID: plan.cluster_id,
        }
        missing = [key for key, value in parents.items() if not value]
        if missing:
            return result.error("Error creating allowlist", f"{missing[0]} cannot be empty")
        if not plan.cidr:
            return result.error("Error creating allowlist", "cidr cannot be empty")

        organization_id = plan.organization_id or ""
        project_id = plan.project_id or ""
        cluster_id = plan.cluster_id or ""
        request = CreateAllowListRequest(cidr=plan.cidr, comment=plan.comment, expires_at=plan.expires_at)
        try:
            outcome = self.execute(
                ctx, self._path(organization_id, project_id, cluster_id), "POST", 201, request,
            )
            created = decode(outcome, CreatedResponse)
        except CapellaError as exc:
            return result.error("Error creating allowlist", f"Could not create allowlist: {parse_error(exc)}")

        result.state = plan.model_copy(update={"id": created.id, "audit": None})
        try:
            result.state = self.retrieve(ctx, organization_id, project_id, cluster_id, created.id)
        except CapellaError as exc:
            result.diagnostics.add_warning("Error creating allowlist", ERROR_AFTER_CREATION + parse_error(exc))
        return result

    def read(self, ctx: CallContext, state: AllowListState) -> OperationResult[AllowListState]:
        result: OperationResult[AllowListState] = OperationResult()
        try:
            ids = _ids(state)
        except ValidationError as exc:
            return result.error("Error reading allowlist", f"Could not read allowlist id {state.id}: {exc}")
        try:
            result.state = self.retrieve(ctx, ids[ORGANIZATION_ID], ids[PROJECT_ID], ids[CLUSTER_ID], ids[ID])
        except CapellaError as exc:
            not_found, detail = check_not_found(exc)
            if not_found:
                return result.remove()
            return result.error("Error reading allowlist", f"Could not read allowlist id {ids[ID]}: {detail}")
        return result

    def update(
        self, ctx: CallContext, plan: AllowListState, state: AllowListState,
    ) -> OperationResult[AllowListState]:
        return OperationResult(state=state).error(
            "Error updating allowlist",
            "allowlist entries cannot be updated in place; delete the entry and create a new one",
        )

    def delete(self, ctx: CallContext, state: AllowListState) -> OperationResult[AllowListState]:
        result: OperationResult[AllowListState] = OperationResult()
        try:
            ids = _ids(state)
        except ValidationError as exc:
            return result.error("Error deleting allowlist", f"Could not delete allowlist id {state.id}: {exc}")
        try:
            self.execute(
                ctx, self._path(ids[ORGANIZATION_ID], ids[PROJECT_ID], ids[CLUSTER_ID], ids[ID]), "DELETE", 204,
            )
        except CapellaError as exc:
            not_found, detail = check_not_found(exc)
            if not_found:
                return result.remove()
            return result.error("Error deleting allowlist", f"Could not delete allowlist id {ids[ID]}: {detail}")
        result.removed = True
        return result

    def import_state(self, ctx: CallContext, import_id: str) -> OperationResult[AllowListState]:
        try:
            ids = parse_composite_id(import_id, _IMPORT_KEYS)
        except ValidationError as exc:
            return OperationResult().error("Error importing allowlist", str(exc))
        return self.read(ctx, AllowListState(
            organization_id=ids[ORGANIZATION_ID],
            project_id=ids[PROJECT_ID],
            cluster_id=ids[CLUSTER_ID],
            id=ids[ID],
        ))
