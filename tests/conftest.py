import json
import logging
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from bom_merger.config import reset_config_manager
from bom_merger.logging import close_logging
from bom_merger.models import Bom, Component, ComponentType, Dependency, Metadata

CONFIG_ENV_VARS = [
    "BOM_MERGE_MODE",
    "BOM_IDENTITY_POLICY",
    "BOM_SPEC_VERSION",
    "BOM_SUBJECT_TYPE",
    "BOM_VALIDATION_MODE",
    "BOM_SCHEMA_DIR",
    "BOM_LOAD_WORKERS",
    "BOM_INPUT_FORMAT",
    "BOM_OUTPUT_FORMAT",
    "BOM_OUTPUT_INDENT",
    "LOG_LEVEL",
    "LOG_FILE",
    "LOG_FORMAT",
    "LOG_MAX_SIZE",
    "LOG_BACKUP_COUNT",
    "LOG_STRUCTURED",
]


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    root_level = logging.getLogger().level
    reset_config_manager()
    yield
    reset_config_manager()
    close_logging()
    logging.getLogger().setLevel(root_level)


@pytest.fixture
def lib() -> Callable[..., Component]:
    def make(name: str, version: str = "1.0", bom_ref: Optional[str] = None, **kwargs) -> Component:
        if bom_ref is None:
            bom_ref = f"pkg:generic/{name}@{version}"
        return Component(name=name, version=version, bom_ref=bom_ref, **kwargs)

    return make


@pytest.fixture
def app() -> Callable[..., Component]:
    def make(name: str, version: str = "1.0", bom_ref: Optional[str] = None, group: Optional[str] = None) -> Component:
        return Component(name=name, version=version, bom_ref=bom_ref, group=group, type=ComponentType.APPLICATION)

    return make


@pytest.fixture
def make_bom() -> Callable[..., Bom]:
    def make(
        *components: Component,
        subject: Optional[Component] = None,
        dependencies: Optional[List[Dependency]] = None,
        serial_number: Optional[str] = None,
        version: int = 1
    ) -> Bom:
        return Bom(
            components=list(components),
            dependencies=dependencies,
            metadata=Metadata(component=subject) if subject is not None else None,
            serial_number=serial_number,
            version=version
        )

    return make


@pytest.fixture
def write_bom_file(tmp_path: Path) -> Callable[[str, Bom], Path]:
    def write(name: str, bom: Bom) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(bom.to_dict()), encoding="utf-8")
        return path

    return write
