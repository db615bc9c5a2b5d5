from typing import Optional

from node_admission.defaults import apply_runtime_class_defaults
from node_admission.models.custom_errors import InvalidObjectError
from node_admission.models.runtime_class import RuntimeClass
from node_admission.utils.logger import get_module_logger
from node_admission.validation.field import ErrorList
from node_admission.validation.object_meta import ObjectMetaValidator
from node_admission.validation.runtime_class import (
    validate_runtime_class,
    validate_runtime_class_update,
)

logger = get_module_logger(__name__)


class RuntimeClassAdmission:
    '''
    Write path for RuntimeClass objects: defaults are applied to the incoming
    object, then it is validated as a create or, when the stored version is
    given, as an update.
    '''

    def __init__(
        self,
        meta_validator: Optional[ObjectMetaValidator] = None,
        apply_defaults: bool = True,
    ):
        self.meta_validator = meta_validator
        self.apply_defaults = apply_defaults

    def admit(self, new: RuntimeClass, old: Optional[RuntimeClass] = None) -> ErrorList:
        if self.apply_defaults:
            apply_runtime_class_defaults(new)
        else:
            logger.debug("Skipping defaults for %s", new)

        if old is None:
            errs = validate_runtime_class(new, self.meta_validator)
        else:
            logger.debug("Validating update of %s", old)
            errs = validate_runtime_class_update(new, old, self.meta_validator)

        if errs:
            logger.info("Rejected %s with %d error(s)", new, len(errs))
        else:
            logger.debug("Admitted %s", new)
        return errs

    def admit_or_raise(self, new: RuntimeClass, old: Optional[RuntimeClass] = None) -> RuntimeClass:
        errs = self.admit(new, old)
        if errs:
            raise InvalidObjectError(new.kind, new.metadata.name, errs)
        return new
