from .allure_utils import attach_screenshot, write_environment_properties

__all__ = [
    "attach_screenshot",
    "write_environment_properties",
]
