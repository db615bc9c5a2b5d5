from typing import Optional

from node_admission.models.runtime_class import Overhead, RuntimeClass
from node_admission.utils.logger import get_module_logger
from node_admission.validation import field
from node_admission.validation.field import ErrorList, Path
from node_admission.validation.names import name_is_dns_label, name_is_dns_subdomain
from node_admission.validation.object_meta import (
    DEFAULT_META_VALIDATOR,
    ObjectMetaValidator,
    validate_immutable_field,
)
from node_admission.validation.resources import validate_resource_requirements

logger = get_module_logger(__name__)


def validate_overhead(overhead: Optional[Overhead], fld_path: Path) -> ErrorList:
    '''
    Validate the pod overhead. No overhead, or no podFixed, is always valid.

    Requests and limits do not need to list the same resources; only resources
    present on both sides are compared.
    '''
    if overhead is None or overhead.pod_fixed is None:
        return ErrorList()
    return validate_resource_requirements(overhead.pod_fixed, fld_path.child("podFixed"))


def validate_runtime_class(
    runtime_class: RuntimeClass,
    meta_validator: Optional[ObjectMetaValidator] = None,
) -> ErrorList:
    meta_validator = meta_validator or DEFAULT_META_VALIDATOR

    all_errs = ErrorList(meta_validator.validate_object_meta(
        runtime_class.metadata,
        False,
        name_is_dns_subdomain,
        Path("metadata"),
    ))

    handler_path = Path("handler")
    if not runtime_class.handler:
        all_errs.append(field.required(handler_path, ""))
    else:
        for msg in name_is_dns_label(runtime_class.handler, False):
            all_errs.append(field.invalid(handler_path, runtime_class.handler, msg))

    all_errs.extend(validate_overhead(runtime_class.overhead, Path("overhead")))

    logger.debug("Validated %s: %d error(s)", runtime_class, len(all_errs))
    return all_errs


def validate_runtime_class_update(
    new: RuntimeClass,
    old: RuntimeClass,
    meta_validator: Optional[ObjectMetaValidator] = None,
) -> ErrorList:
    '''
    Validate an update of ``old`` to ``new``. ``new`` is first checked as if it
    were being created, then against ``old``: the handler may never change, the
    overhead may as long as the new value is valid on its own.
    '''
    meta_validator = meta_validator or DEFAULT_META_VALIDATOR

    all_errs = validate_runtime_class(new, meta_validator)
    all_errs.extend(meta_validator.validate_object_meta_update(new.metadata, old.metadata, Path("metadata")))
    all_errs.extend(validate_immutable_field(new.handler, old.handler, Path("handler")))
    return all_errs
