import json
import logging
import os
from typing import Dict, Any, Optional

from atm_controller.paths import get_resource_path
from atm_controller.core.config_loader import ConfigLoader

logger = logging.getLogger(__name__)

FALLBACK_LANG = "EN"


class I18nManager:
    def __init__(self, lang: Optional[str] = None):
        if lang is None:
            lang = ConfigLoader().section("system").get("language", FALLBACK_LANG)
        self.current_lang = lang
        self.translations: Dict[str, Any] = {}
        self.load_language(lang)

    def load_language(self, lang_code: str):
        """Load specific language JSON"""
        # Path: resources/i18n/{LANG}/text/{LANG}.json
        relative_path = f"i18n/{lang_code}/text/{lang_code}.json"
        path = get_resource_path(relative_path)

        if not os.path.exists(path):
            logger.warning("Language file not found: %s (falling back to %s)", path, FALLBACK_LANG)
            if lang_code != FALLBACK_LANG:
                self.load_language(FALLBACK_LANG)
            return

        with open(path, "r", encoding="utf-8") as f:
            self.translations = json.load(f)
        self.current_lang = lang_code

    def get(self, key: str, **kwargs) -> str:
        """
        Get translated string by key (e.g. "menu.title").
        Supports formatting (e.g. {amount}).
        """
        val = self.translations
        for k in key.split("."):
            if not isinstance(val, dict) or k not in val:
                return f"MISSING:{key}"
            val = val[k]

        if not isinstance(val, str):
            return str(val)
        if kwargs:
            try:
                return val.format(**kwargs)
            except (KeyError, IndexError, ValueError):
                logger.warning("Could not format message %s", key)
                return val
        return val

    def set_language(self, lang_code: str):
        self.load_language(lang_code)
