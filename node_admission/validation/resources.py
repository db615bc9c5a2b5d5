from typing import Optional

from node_admission.models.resources import (
    RESOURCE_CPU,
    RESOURCE_EPHEMERAL_STORAGE,
    RESOURCE_MEMORY,
    RESOURCE_REQUESTS_PREFIX,
    Quantity,
    ResourceList,
    ResourceRequirements,
    is_hugepage_resource_name,
    is_native_resource,
)
from node_admission.validation import field
from node_admission.validation.field import ErrorList, Path
from node_admission.validation.names import is_qualified_name

STANDARD_CONTAINER_RESOURCES = {
    RESOURCE_CPU,
    RESOURCE_MEMORY,
    RESOURCE_EPHEMERAL_STORAGE,
}

STANDARD_RESOURCES = STANDARD_CONTAINER_RESOURCES | {
    "pods",
    "services",
    "replicationcontrollers",
    "resourcequotas",
    "secrets",
    "configmaps",
    "persistentvolumeclaims",
    "storage",
    "requests.cpu",
    "requests.memory",
    "requests.ephemeral-storage",
    "requests.storage",
    "limits.cpu",
    "limits.memory",
    "limits.ephemeral-storage",
    "services.nodeports",
    "services.loadbalancers",
}


def is_standard_container_resource_name(name: str) -> bool:
    return name in STANDARD_CONTAINER_RESOURCES or is_hugepage_resource_name(name)


def is_standard_resource_name(name: str) -> bool:
    return name in STANDARD_RESOURCES or is_hugepage_resource_name(name)


def is_extended_resource_name(name: str) -> bool:
    if is_native_resource(name) or name.startswith(RESOURCE_REQUESTS_PREFIX):
        return False
    # quota is tracked as "requests.<name>", which must itself be a qualified name
    return not is_qualified_name(RESOURCE_REQUESTS_PREFIX + name)


def validate_resource_name(value: str, fld_path: Path) -> ErrorList:
    all_errs = ErrorList()
    for msg in is_qualified_name(value):
        all_errs.append(field.invalid(fld_path, value, msg))
    if all_errs:
        return all_errs

    if "/" not in value and not is_standard_resource_name(value):
        all_errs.append(field.invalid(fld_path, value, "must be a standard resource type or fully qualified"))
    return all_errs


def validate_container_resource_name(value: str, fld_path: Path) -> ErrorList:
    all_errs = validate_resource_name(value, fld_path)
    if "/" not in value:
        if not is_standard_container_resource_name(value):
            all_errs.append(field.invalid(fld_path, value, "must be a standard resource for containers"))
    elif not is_native_resource(value) and not is_extended_resource_name(value):
        all_errs.append(field.invalid(fld_path, value, "doesn't follow extended resource name standard"))
    return all_errs


def validate_nonnegative_quantity(quantity: Quantity, fld_path: Path) -> ErrorList:
    all_errs = ErrorList()
    if quantity.is_negative():
        all_errs.append(field.invalid(fld_path, str(quantity), "must be greater than or equal to 0"))
    return all_errs


def _validate_resource_list(resources: Optional[ResourceList], fld_path: Path) -> ErrorList:
    all_errs = ErrorList()
    for name in sorted(resources or {}):
        entry_path = fld_path.key(name)
        all_errs.extend(validate_container_resource_name(name, entry_path))
        all_errs.extend(validate_nonnegative_quantity(resources[name], entry_path))
    return all_errs


def validate_resource_requirements(requirements: Optional[ResourceRequirements], fld_path: Path) -> ErrorList:
    '''
    Checks every entry of requests and limits independently, then requires
    request <= limit for resources listed in both. Absent maps count as empty.
    '''
    all_errs = ErrorList()
    if requirements is None:
        return all_errs

    lim_path = fld_path.child("limits")
    req_path = fld_path.child("requests")
    limits = requirements.limits or {}
    requests = requirements.requests or {}

    all_errs.extend(_validate_resource_list(limits, lim_path))
    all_errs.extend(_validate_resource_list(requests, req_path))

    for name in sorted(requests):
        limit = limits.get(name)
        if limit is None:
            continue
        request = requests[name]
        if request > limit:
            all_errs.append(field.invalid(
                req_path.key(name),
                str(request),
                f"must be less than or equal to {name} limit of {limit}",
            ))
    return all_errs
