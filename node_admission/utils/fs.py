import json
import os
from typing import Union

import yaml
from pydantic import ValidationError

from node_admission.models.custom_errors import ManifestLoadError
from node_admission.models.runtime_class import (
    RUNTIME_CLASS_LIST_KIND,
    RuntimeClass,
    RuntimeClassList,
)
from node_admission.utils.logger import get_module_logger

logger = get_module_logger(__name__)


def format_from_path(path: str) -> str:
    if path.lower().endswith(".json"):
        return "json"
    return "yaml"


def read_manifest_from_file(path: str) -> Union[RuntimeClass, RuntimeClassList]:
    '''
    Read a RuntimeClass or RuntimeClassList manifest from a YAML or JSON file.
    A top level list of objects is read as a RuntimeClassList.
    '''
    if not os.path.exists(path):
        raise ManifestLoadError(f"Manifest file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        try:
            if format_from_path(path) == "json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
        except (UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as error:
            raise ManifestLoadError(f"Unable to parse {path}: {error}") from error

    if data is None:
        raise ManifestLoadError(f"Manifest file is empty: {path}")
    if isinstance(data, list):
        data = {"kind": RUNTIME_CLASS_LIST_KIND, "items": data}
    if not isinstance(data, dict):
        raise ManifestLoadError(f"Manifest must be an object, got {type(data).__name__}")

    try:
        if data.get("kind") == RUNTIME_CLASS_LIST_KIND:
            manifest = RuntimeClassList.model_validate(data)
        else:
            manifest = RuntimeClass.model_validate(data)
    except ValidationError as error:
        raise ManifestLoadError(f"Unable to decode {path}: {error}") from error

    logger.debug("Read %s from %s", manifest.kind, path)
    return manifest


def dump_data(data: dict, format: str = 'yaml') -> str:
    if format == 'json':
        return json.dumps(data, indent=2)
    return yaml.safe_dump(data, sort_keys=False)


def save_data_to_file(data: dict, path: str, format: str = 'yaml'):
    with open(path, 'w', encoding='utf-8') as f:
        f.write(dump_data(data, format))
    logger.info("Saved manifest to %s", path)
