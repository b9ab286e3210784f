"""Minimal deterministic OpenAPI spec builder.

Paths come from the ``OPERATIONS`` registry below; enum-backed schemas are
generated from ``helpdesk.constants.enums`` so the docs never drift from the
values the API accepts.
"""
from typing import Any, Dict, List, Tuple
from helpdesk.constants.enums import (
    UserRole, TicketCategory, TicketPriority, TicketStatus, OutageType, enum_values,
)

__all__ = ["build_openapi_spec", "OPERATIONS"]

# (method, path, summary, response schema, access)
OPERATIONS: List[Tuple[str, str, str, str, str]] = [
    ("post", "/iam/auth/login", "Login", "Token", "public"),
    ("get", "/iam/auth/me", "Current user", "User", "authenticated"),
    ("get", "/iam/users", "List users", "UserList", "admin"),
    ("post", "/iam/users", "Create user", "User", "admin"),
    ("get", "/iam/users/{user_id}", "Get user", "User", "staff or self"),
    ("patch", "/iam/users/{user_id}", "Update user", "User", "admin"),
    ("get", "/tickets", "List tickets", "TicketList", "authenticated"),
    ("post", "/tickets", "Create ticket", "Ticket", "authenticated"),
    ("get", "/tickets/{ticket_id}", "Get ticket", "Ticket", "staff or owner"),
    ("patch", "/tickets/{ticket_id}", "Update ticket", "Ticket", "staff"),
    ("post", "/tickets/{ticket_id}/assign", "Assign ticket to agent", "Ticket", "staff"),
    ("get", "/tickets/{ticket_id}/comments", "List ticket comments", "CommentList", "staff or owner"),
    ("post", "/tickets/{ticket_id}/comments", "Add comment", "Comment", "staff or owner"),
    ("patch", "/comments/{comment_id}", "Update comment", "Comment", "author or admin"),
    ("get", "/tickets/{ticket_id}/attachments", "List ticket attachments", "AttachmentList", "staff or owner"),
    ("post", "/tickets/{ticket_id}/attachments", "Register attachment", "Attachment", "staff or owner"),
    ("delete", "/attachments/{attachment_id}", "Delete attachment", "DeleteResult", "staff"),
    ("get", "/reports/tickets/stats", "Ticket statistics", "TicketStats", "staff"),
    ("get", "/meta/enums", "Enumerations for client dropdowns", "Enumerations", "public"),
]

QUERY_PARAMS: Dict[str, List[str]] = {
    "/iam/users": ["role", "limit", "offset"],
    "/tickets": ["customer_id", "assigned_agent_id", "status", "category", "priority", "limit", "offset", "sort"],
    "/tickets/{ticket_id}/comments": ["include_internal"],
    "/reports/tickets/stats": ["agent_id"],
}


def _enum(enum_cls) -> Dict[str, Any]:
    return {"type": "string", "enum": enum_values(enum_cls)}


def _ts(nullable: bool = False) -> Dict[str, Any]:
    schema = {"type": "string", "format": "date-time"}
    if nullable:
        schema["nullable"] = True
    return schema


def _obj(props: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "object", "properties": props, "required": sorted(props)}


def _ref(name: str) -> Dict[str, str]:
    return {"$ref": f"#/components/schemas/{name}"}


def _list_of(name: str, paginated: bool) -> Dict[str, Any]:
    props: Dict[str, Any] = {"data": {"type": "array", "items": _ref(name)}}
    if paginated:
        props["pagination"] = _ref("Pagination")
    return _obj(props)


def _schemas() -> Dict[str, Any]:
    integer = {"type": "integer"}
    string = {"type": "string"}
    count_map = {"type": "object", "additionalProperties": integer}
    return {
        "UserRole": _enum(UserRole),
        "TicketCategory": _enum(TicketCategory),
        "TicketPriority": _enum(TicketPriority),
        "TicketStatus": _enum(TicketStatus),
        "RfoDetails": {
            "type": "object",
            "nullable": True,
            "properties": {
                "outage_type": _enum(OutageType),
                "affected_areas": {"type": "array", "items": string},
                "estimated_duration": string,
                "services_affected": {"type": "array", "items": string},
                "root_cause": string,
                "resolution_steps": string,
            },
        },
        "User": _obj({
            "id": integer, "name": string, "email": string, "role": _ref("UserRole"),
            "created_at": _ts(), "updated_at": _ts(),
        }),
        "Token": _obj({"access_token": string, "user": _ref("User")}),
        "Ticket": _obj({
            "id": integer, "subject": string, "description": string,
            "category": _ref("TicketCategory"), "priority": _ref("TicketPriority"),
            "status": _ref("TicketStatus"), "customer_id": integer,
            "assigned_agent_id": {"type": "integer", "nullable": True},
            "rfo_details": _ref("RfoDetails"),
            "created_at": _ts(), "updated_at": _ts(), "resolved_at": _ts(nullable=True),
        }),
        "Comment": _obj({
            "id": integer, "ticket_id": integer, "user_id": integer, "content": string,
            "is_internal": {"type": "boolean"}, "created_at": _ts(),
        }),
        "Attachment": _obj({
            "id": integer, "ticket_id": integer, "filename": string, "file_path": string,
            "file_size": integer, "mime_type": string, "uploaded_by": integer, "created_at": _ts(),
        }),
        "TicketStats": _obj({
            "total": integer,
            **{status: integer for status in enum_values(TicketStatus)},
            "by_category": count_map,
            "by_priority": count_map,
        }),
        "Enumerations": _obj({
            name: {"type": "array", "items": string}
            for name in ("roles", "categories", "priorities", "statuses", "outage_types")
        }),
        "DeleteResult": _obj({"deleted": {"type": "boolean"}}),
        "Pagination": _obj({"total": integer, "limit": integer, "offset": integer, "returned": integer}),
        "UserList": _list_of("User", paginated=True),
        "TicketList": _list_of("Ticket", paginated=True),
        "CommentList": _list_of("Comment", paginated=False),
        "AttachmentList": _list_of("Attachment", paginated=False),
        "Error": _obj({"error": _obj({"status": integer, "title": string, "detail": string})}),
    }


def _path_params(path: str) -> List[Dict[str, Any]]:
    names = [seg[1:-1] for seg in path.split("/") if seg.startswith("{")]
    return [{"name": n, "in": "path", "required": True, "schema": {"type": "integer"}} for n in names]


def build_openapi_spec() -> Dict[str, Any]:
    paths: Dict[str, Any] = {}
    tags = set()
    for method, path, summary, schema_name, access in OPERATIONS:
        tag = path.split("/")[1].capitalize()
        tags.add(tag)
        status = "201" if method == "post" and summary.startswith(("Create", "Add", "Register")) else "200"
        params = _path_params(path)
        if method == "get":
            params += [{"name": q, "in": "query", "schema": {"type": "string"}} for q in QUERY_PARAMS.get(path, [])]
        op: Dict[str, Any] = {
            "summary": summary,
            "operationId": f"{method}_" + path.strip("/").replace("/", "_").replace("{", "").replace("}", ""),
            "tags": [tag],
            "x-access": access,
            "responses": {
                status: {"description": "OK", "content": {"application/json": {"schema": _ref(schema_name)}}},
                "400": {"$ref": "#/components/responses/BadRequest"},
                "404": {"$ref": "#/components/responses/NotFound"},
            },
        }
        if params:
            op["parameters"] = params
        if access == "public":
            op["security"] = []
        paths.setdefault(path, {})[method] = op

    error_content = {"application/json": {"schema": _ref("Error")}}
    return {
        "openapi": "3.0.3",
        "info": {"title": "ISP Helpdesk API", "version": "0.1.0"},
        "paths": paths,
        "components": {
            "schemas": _schemas(),
            "responses": {
                "NotFound": {"description": "Not Found", "content": error_content},
                "BadRequest": {"description": "Bad Request", "content": error_content},
            },
            "securitySchemes": {"BearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}},
        },
        "security": [{"BearerAuth": []}],
        "tags": [{"name": n, "description": f"{n} endpoints"} for n in sorted(tags)],
    }
