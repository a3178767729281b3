from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from domain.errors import UnknownTemplateError
from domain.models import ArchitectureDocument
from domain.services.validate_architecture import parse_architecture

TemplateParams = Mapping[str, str]


def _three_tier(params: TemplateParams) -> dict[str, Any]:
    return {
        "nodes": [
            {"id": "user", "type": "actor", "label": "User"},
            {"id": "web", "type": "ui", "label": params.get("frontend") or "Web App"},
            {"id": "api", "type": "service", "label": params.get("backend") or "API Server"},
            {"id": "db", "type": "database", "label": params.get("database") or "Database"},
        ],
        "connections": [
            {"from": "user", "to": "web", "type": "http", "label": "Browse"},
            {"from": "web", "to": "api", "type": "http", "label": "API Calls"},
            {"from": "api", "to": "db", "type": "query", "label": "SQL"},
        ],
        "groups": [
            {"id": "frontend", "label": "Frontend", "contains": ["web"]},
            {"id": "backend", "label": "Backend", "contains": ["api", "db"]},
        ],
        "layout": {"type": "hierarchical", "direction": "TB"},
    }


def _microservices(params: TemplateParams) -> dict[str, Any]:
    return {
        "nodes": [
            {"id": "user", "type": "actor", "label": "User"},
            {"id": "gateway", "type": "gateway", "label": params.get("gateway") or "API Gateway"},
            {"id": "auth", "type": "service", "label": "Auth Service"},
            {"id": "user-service", "type": "service", "label": "User Service"},
            {"id": "order-service", "type": "service", "label": "Order Service"},
            {"id": "queue", "type": "queue", "label": params.get("queue") or "Message Queue"},
            {"id": "cache", "type": "cache", "label": params.get("cache") or "Redis"},
            {"id": "db1", "type": "database", "label": "User DB"},
            {"id": "db2", "type": "database", "label": "Order DB"},
        ],
        "connections": [
            {"from": "user", "to": "gateway", "type": "http"},
            {"from": "gateway", "to": "auth", "type": "http"},
            {"from": "gateway", "to": "user-service", "type": "http"},
            {"from": "gateway", "to": "order-service", "type": "http"},
            {"from": "user-service", "to": "cache", "type": "query"},
            {"from": "user-service", "to": "db1", "type": "query"},
            {"from": "order-service", "to": "queue", "type": "async"},
            {"from": "order-service", "to": "db2", "type": "query"},
        ],
        "groups": [
            {
                "id": "services",
                "label": "Microservices",
                "contains": ["auth", "user-service", "order-service"],
            },
            {"id": "data", "label": "Data Layer", "contains": ["cache", "db1", "db2"]},
        ],
        "layout": {"type": "layered", "direction": "TB"},
    }


def _event_driven(params: TemplateParams) -> dict[str, Any]:
    return {
        "nodes": [
            {"id": "producer", "type": "service", "label": "Event Producer"},
            {"id": "broker", "type": "queue", "label": params.get("broker") or "Event Broker"},
            {"id": "consumer1", "type": "service", "label": "Consumer A"},
            {"id": "consumer2", "type": "service", "label": "Consumer B"},
            {"id": "store", "type": "database", "label": params.get("store") or "Event Store"},
        ],
        "connections": [
            {"from": "producer", "to": "broker", "type": "async", "label": "Publish"},
            {"from": "broker", "to": "consumer1", "type": "async", "label": "Subscribe"},
            {"from": "broker", "to": "consumer2", "type": "async", "label": "Subscribe"},
            {"from": "broker", "to": "store", "type": "data_flow", "label": "Persist"},
        ],
        "layout": {"type": "hierarchical", "direction": "LR"},
    }


TEMPLATES: dict[str, Callable[[TemplateParams], dict[str, Any]]] = {
    "three-tier": _three_tier,
    "microservices": _microservices,
    "event-driven": _event_driven,
}


def available_templates() -> list[str]:
    return list(TEMPLATES)


def build_template_payload(name: str, params: TemplateParams | None = None) -> dict[str, Any]:
    factory = TEMPLATES.get(name)
    if factory is None:
        raise UnknownTemplateError(name, available_templates())
    return factory(params or {})


def build_template(name: str, params: TemplateParams | None = None) -> ArchitectureDocument:
    return parse_architecture(build_template_payload(name, params))


@dataclass(frozen=True)
class TemplateArchitectureSource:
    name: str
    params: dict[str, str] = field(default_factory=dict)

    def load(self) -> ArchitectureDocument:
        return build_template(self.name, self.params)
