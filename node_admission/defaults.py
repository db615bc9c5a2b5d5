from node_admission.models.resources import ResourceRequirements
from node_admission.models.runtime_class import Overhead, RuntimeClass, RuntimeClassList
from node_admission.utils.logger import get_module_logger

logger = get_module_logger(__name__)


def apply_overhead_defaults(overhead: Overhead):
    '''
    Fill in an overhead so that requests and limits are both present and list
    the same resources.

    A resource given on only one side is copied to the other. A resource given
    on both sides is left alone even if the two values differ; that is for
    validation to reject.
    '''
    if overhead.pod_fixed is None:
        overhead.pod_fixed = ResourceRequirements(requests={}, limits={})
        return

    pod_fixed = overhead.pod_fixed
    # overhead limits are never unbounded
    if pod_fixed.limits is None:
        pod_fixed.limits = {}
    if pod_fixed.requests is None:
        pod_fixed.requests = {}

    for name, quantity in list(pod_fixed.limits.items()):
        if name not in pod_fixed.requests:
            logger.debug("Defaulting overhead request %s to limit %s", name, quantity)
            pod_fixed.requests[name] = quantity.copy()
    for name, quantity in list(pod_fixed.requests.items()):
        if name not in pod_fixed.limits:
            logger.debug("Defaulting overhead limit %s to request %s", name, quantity)
            pod_fixed.limits[name] = quantity.copy()


def apply_runtime_class_defaults(runtime_class: RuntimeClass):
    if runtime_class.overhead is not None:
        apply_overhead_defaults(runtime_class.overhead)


def apply_runtime_class_list_defaults(runtime_class_list: RuntimeClassList):
    for runtime_class in runtime_class_list.items:
        apply_runtime_class_defaults(runtime_class)
