"""
nlpkit Configuration Module
Centralized configuration for the toolkit.
"""

import os
from pathlib import Path

# Debug Mode Configuration
DEBUG_MODE = os.environ.get('NLPKIT_DEBUG', 'false').lower() == 'true'

# Application Paths
APP_NAME = "nlpkit"
APP_DIR = Path(os.environ.get('NLPKIT_HOME', os.path.expanduser('~/.config'))) / APP_NAME
LOGS_DIR = APP_DIR / "logs"

# Logging Configuration
DEBUG_LOG_FILE = LOGS_DIR / "debug_flow.txt"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Feature Generator Descriptor Format
FEATURE_GENERATORS_TAG = "featureGenerators"
GENERATOR_TAG = "generator"
CLASS_ATTRIBUTE = "class"
NAME_ATTRIBUTE = "name"
GENERATOR_KEY_PREFIX = "generator#"

# Factory plugin modules, imported so their @register_factory decorators run
PLUGIN_CONFIG_FILE = Path(
    os.environ.get(
        'NLPKIT_PLUGIN_CONFIG',
        Path(__file__).parent / "featuregen" / "plugins.yaml",
    )
)

# Bundled descriptors
DESCRIPTORS_DIR = Path(__file__).parent / "featuregen" / "descriptors"
DEFAULT_NAMEFINDER_DESCRIPTOR = DESCRIPTORS_DIR / "default_namefinder.xml"
