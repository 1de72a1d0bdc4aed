"""
Behave environment configuration for DNS Records Normalizer scenarios.
"""

import logging
import shutil
import tempfile
from pathlib import Path

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def before_all(context):
    """Set up test environment before all tests."""
    context.test_zone = "contoso.com"
    context.test_server = "DC01"
    logger.info("Test environment setup complete")


def before_scenario(context, scenario):
    """Set up each test scenario."""
    context.scenario_name = scenario.name
    context.test_data_dir = Path(tempfile.mkdtemp(prefix="dns_normalizer_"))
    context.raw_records = []
    context.normalized = []
    context.error = None
    logger.info(f"Starting scenario: {scenario.name}")


def after_scenario(context, scenario):
    """Clean up after each test scenario."""
    shutil.rmtree(context.test_data_dir, ignore_errors=True)
    logger.info(f"Completed scenario: {scenario.name}")
