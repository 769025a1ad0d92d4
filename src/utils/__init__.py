"""
Utility modules for the quote wizard
"""
from .config_loader import load_wizard_config, WizardConfig

__all__ = [
    'load_wizard_config',
    'WizardConfig',
]
