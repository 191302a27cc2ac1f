import os

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


def get_resource_path(relative_path):
    """Absolute path of a file under atm_controller/resources (e.g. "config/atm_config.yml")."""
    return os.path.join(PACKAGE_DIR, "resources", relative_path)
