"""
================================================================================
Allure Report Utilities
================================================================================

Attachment helpers used by the screenshot side channel and the pytest hooks.

Features:
- Screenshot attachments
- environment.properties for the Allure "Environment" widget

================================================================================
"""

import platform
from pathlib import Path
from typing import Dict, Optional, Union

import allure
from loguru import logger


def attach_screenshot(
    source: Union[bytes, str, Path],
    name: str = "Screenshot",
):
    """
    Attach a PNG screenshot to Allure report.

    Args:
        source: Raw PNG bytes or path to a PNG file on disk
        name: Attachment name
    """
    if isinstance(source, (str, Path)):
        allure.attach.file(
            str(source),
            name=name,
            attachment_type=allure.attachment_type.PNG
        )
    else:
        allure.attach(
            source,
            name=name,
            attachment_type=allure.attachment_type.PNG
        )


def write_environment_properties(
    results_dir: Union[str, Path],
    extra: Optional[Dict[str, object]] = None,
) -> Path:
    """
    Write environment.properties into the Allure results directory.

    Args:
        results_dir: Allure results directory (--alluredir)
        extra: Additional key/value pairs, e.g. browser kind and headless flag

    Returns:
        Path to the written file
    """
    results_dir = Path(results_dir)
    results_dir.mkdir(parents=True, exist_ok=True)

    properties: Dict[str, object] = {
        "OS": platform.system(),
        "OS.Version": platform.release(),
        "Python.Version": platform.python_version(),
    }
    if extra:
        properties.update(extra)

    env_file = results_dir / "environment.properties"
    lines = [f"{key}={value}" for key, value in properties.items()]
    env_file.write_text("\n".join(lines) + "\n", encoding="utf-8")

    logger.debug(f"Allure environment written to: {env_file}")
    return env_file
