"""
Configuration for Verbico.
"""

from .settings import AppSettings, get_default_settings_path, get_default_prompts_dir

__all__ = ['AppSettings', 'get_default_settings_path', 'get_default_prompts_dir']
