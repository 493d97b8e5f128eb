"""Models describing registered integrations (uniform)."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import datetime

from .models import JSONModel, _list, _model, _str, _time


@dataclass
class KubernetesMetaData(JSONModel):
    namespace: str = _str("namespace", omitempty=False)
    pod_name: str = _str("podname", omitempty=False)
    deployment_name: str = _str("deploymentname", omitempty=False)


@dataclass
class MetaData(JSONModel):
    hostname: str = _str("hostname", omitempty=False)
    integration_version: str = _str("integrationversion", omitempty=False)
    distributor_version: str = _str("distributorversion", omitempty=False)
    location: str = _str("location", omitempty=False)
    kubernetes_metadata: KubernetesMetaData = _model("kubernetesmetadata", KubernetesMetaData, required=True)
    last_seen: datetime | None = _time("lastseen")


@dataclass
class SubscriptionFilter(JSONModel):
    project: str = _str("project", omitempty=False)
    stage: str = _str("stage", omitempty=False)
    service: str = _str("service", omitempty=False)


@dataclass
class Subscription(JSONModel):
    topics: list[str] = _list("topics")
    status: str = _str("status", omitempty=False)
    filter: SubscriptionFilter = _model("filter", SubscriptionFilter, required=True)


@dataclass
class Integration(JSONModel):
    id: str = _str("id", omitempty=False)
    name: str = _str("name", omitempty=False)
    metadata: MetaData = _model("metadata", MetaData, required=True)
    subscription: Subscription = _model("subscription", Subscription, required=True)


@dataclass
class IntegrationID(JSONModel):
    """Identifying attributes of an integration."""

    name: str = _str("name", omitempty=False)
    namespace: str = _str("namespace", omitempty=False)
    project: str = _str("project", omitempty=False)
    stage: str = _str("stage", omitempty=False)
    service: str = _str("service", omitempty=False)

    def hash(self) -> str:
        """Return the SHA-1 hex digest identifying this integration."""
        if not (self.name and self.namespace):
            raise ValueError("incomplete integration ID. At least 'name' and 'namespace' must be set")
        raw = f"{self.name}-{self.namespace}-{self.project}-{self.stage}-{self.service}"
        return hashlib.sha1(raw.encode()).hexdigest()  # noqa: S324