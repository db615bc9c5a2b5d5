'''
Validation of object metadata. The RuntimeClass validators only talk to the
ObjectMetaValidator interface so callers can plug in their own rules.
'''
from abc import ABC, abstractmethod
from typing import Dict

from node_admission.models.runtime_class import ObjectMeta
from node_admission.validation import field
from node_admission.validation.field import ErrorList, Path
from node_admission.validation.names import (
    NameValidator,
    is_qualified_name,
    is_valid_label_value,
    name_is_dns_label,
    name_is_dns_subdomain,
)

TOTAL_ANNOTATION_SIZE_LIMIT_BYTES = 256 * (1 << 10)


class ObjectMetaValidator(ABC):

    @abstractmethod
    def validate_object_meta(
        self,
        meta: ObjectMeta,
        namespaced: bool,
        name_fn: NameValidator,
        fld_path: Path,
    ) -> ErrorList:
        pass

    @abstractmethod
    def validate_object_meta_update(
        self,
        new_meta: ObjectMeta,
        old_meta: ObjectMeta,
        fld_path: Path,
    ) -> ErrorList:
        pass


def validate_labels(labels: Dict[str, str], fld_path: Path) -> ErrorList:
    all_errs = ErrorList()
    for key in sorted(labels):
        for msg in is_qualified_name(key):
            all_errs.append(field.invalid(fld_path, key, msg))
        for msg in is_valid_label_value(labels[key]):
            all_errs.append(field.invalid(fld_path, labels[key], msg))
    return all_errs


def validate_annotations(annotations: Dict[str, str], fld_path: Path) -> ErrorList:
    all_errs = ErrorList()
    total_size = 0
    for key in sorted(annotations):
        for msg in is_qualified_name(key.lower()):
            all_errs.append(field.invalid(fld_path, key, msg))
        total_size += len(key) + len(annotations[key])
    if total_size > TOTAL_ANNOTATION_SIZE_LIMIT_BYTES:
        all_errs.append(field.too_long(fld_path, "", TOTAL_ANNOTATION_SIZE_LIMIT_BYTES))
    return all_errs


def validate_nonnegative_field(value: int, fld_path: Path) -> ErrorList:
    all_errs = ErrorList()
    if value < 0:
        all_errs.append(field.invalid(fld_path, value, "must be greater than or equal to 0"))
    return all_errs


def validate_immutable_field(new_value, old_value, fld_path: Path) -> ErrorList:
    all_errs = ErrorList()
    if new_value != old_value:
        all_errs.append(field.immutable(fld_path, new_value))
    return all_errs


class DefaultObjectMetaValidator(ObjectMetaValidator):
    '''
    Metadata rules shared by all API objects: name syntax, namespace scoping,
    label and annotation syntax, and the fields frozen after creation.
    '''

    def validate_object_meta(self, meta, namespaced, name_fn, fld_path):
        all_errs = ErrorList()

        if meta.generate_name:
            for msg in name_fn(meta.generate_name, True):
                all_errs.append(field.invalid(fld_path.child("generateName"), meta.generate_name, msg))

        if not meta.name:
            if not meta.generate_name:
                all_errs.append(field.required(fld_path.child("name"), "name or generateName is required"))
        else:
            for msg in name_fn(meta.name, False):
                all_errs.append(field.invalid(fld_path.child("name"), meta.name, msg))

        if namespaced:
            if not meta.namespace:
                all_errs.append(field.required(fld_path.child("namespace"), ""))
            else:
                for msg in name_is_dns_label(meta.namespace, False):
                    all_errs.append(field.invalid(fld_path.child("namespace"), meta.namespace, msg))
        elif meta.namespace:
            all_errs.append(field.forbidden(fld_path.child("namespace"), "not allowed on this type"))

        if meta.cluster_name:
            for msg in name_is_dns_subdomain(meta.cluster_name, False):
                all_errs.append(field.invalid(fld_path.child("clusterName"), meta.cluster_name, msg))

        all_errs.extend(validate_nonnegative_field(meta.generation, fld_path.child("generation")))
        all_errs.extend(validate_labels(meta.labels, fld_path.child("labels")))
        all_errs.extend(validate_annotations(meta.annotations, fld_path.child("annotations")))
        return all_errs

    def validate_object_meta_update(self, new_meta, old_meta, fld_path):
        all_errs = ErrorList()

        if not new_meta.resource_version:
            all_errs.append(field.invalid(
                fld_path.child("resourceVersion"),
                new_meta.resource_version,
                "must be specified for an update",
            ))
        all_errs.extend(validate_nonnegative_field(new_meta.generation, fld_path.child("generation")))

        all_errs.extend(validate_immutable_field(new_meta.name, old_meta.name, fld_path.child("name")))
        all_errs.extend(validate_immutable_field(new_meta.namespace, old_meta.namespace, fld_path.child("namespace")))
        all_errs.extend(validate_immutable_field(new_meta.uid, old_meta.uid, fld_path.child("uid")))
        all_errs.extend(validate_immutable_field(
            new_meta.creation_timestamp, old_meta.creation_timestamp, fld_path.child("creationTimestamp")))
        all_errs.extend(validate_immutable_field(
            new_meta.cluster_name, old_meta.cluster_name, fld_path.child("clusterName")))

        all_errs.extend(validate_labels(new_meta.labels, fld_path.child("labels")))
        all_errs.extend(validate_annotations(new_meta.annotations, fld_path.child("annotations")))
        return all_errs


DEFAULT_META_VALIDATOR = DefaultObjectMetaValidator()
