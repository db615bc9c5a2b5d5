from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel

from node_admission.models.resources import ResourceRequirements

API_GROUP = "node.k8s.io"
API_VERSION = f"{API_GROUP}/v1beta1"
RUNTIME_CLASS_KIND = "RuntimeClass"
RUNTIME_CLASS_LIST_KIND = "RuntimeClassList"


class APIModel(BaseModel):
    # Wire manifests are camelCase; attributes stay snake_case.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_manifest(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def _omit_empty_values(data: dict) -> dict:
    return {key: value for key, value in data.items() if value not in ("", 0, {}, None)}


class ObjectMeta(APIModel):
    name: str = ""
    generate_name: str = ""
    namespace: str = ""
    uid: str = ""
    resource_version: str = ""
    generation: int = 0
    creation_timestamp: Optional[datetime] = None
    labels: Dict[str, str] = {}
    annotations: Dict[str, str] = {}
    cluster_name: str = ""

    @model_serializer(mode="wrap")
    def omit_empty(self, handler):
        return _omit_empty_values(handler(self))


class ListMeta(APIModel):
    resource_version: str = ""
    continue_: str = Field(default="", alias="continue")
    remaining_item_count: Optional[int] = None

    @model_serializer(mode="wrap")
    def omit_empty(self, handler):
        return _omit_empty_values(handler(self))


class Overhead(APIModel):
    '''Fixed resource cost of running a pod with a given RuntimeClass.'''
    pod_fixed: Optional[ResourceRequirements] = None


class RuntimeClass(APIModel):
    '''
    Cluster scoped object selecting the container runtime configuration
    (``handler``) used to run a pod, plus its optional per-pod overhead.
    '''
    api_version: str = API_VERSION
    kind: str = RUNTIME_CLASS_KIND
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    handler: str = ""
    overhead: Optional[Overhead] = None

    def __str__(self):
        return f"{self.kind}({self.metadata.name})"


class RuntimeClassList(APIModel):
    api_version: str = API_VERSION
    kind: str = RUNTIME_CLASS_LIST_KIND
    metadata: ListMeta = Field(default_factory=ListMeta)
    items: List[RuntimeClass] = []
