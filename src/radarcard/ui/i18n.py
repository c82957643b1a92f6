"""
Internationalization (i18n) module for the radar card.
Supports English and Russian languages.
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Dict, Optional


class Language(Enum):
    """Available languages."""
    ENGLISH = "en"
    RUSSIAN = "ru"


def parse_language(code: Optional[str], default: Language = Language.ENGLISH) -> Language:
    """Map a host language tag such as "ru-RU" onto a supported language."""
    token = (code or "").strip().lower().replace("_", "-").split("-", 1)[0]
    for language in Language:
        if language.value == token:
            return language
    return default


class I18n:
    """Translations for card messages, tooltips and dialogs."""

    def __init__(self, default_language: Language = Language.ENGLISH):
        self.current_language = default_language
        self.translations = self._load_translations()

    @classmethod
    def from_env(cls) -> "I18n":
        return cls(parse_language(os.getenv("RADAR_CARD_LANG")))

    def _load_translations(self) -> Dict[str, Dict[Language, str]]:
        return {
            "card.name": {
                Language.ENGLISH: "Radar Card",
                Language.RUSSIAN: "Карточка радара",
            },
            "card.no_entities": {
                Language.ENGLISH: "No entities to show",
                Language.RUSSIAN: "Нет объектов для отображения",
            },
            "card.no_entities_defined": {
                Language.ENGLISH: "You need to define at least one entity",
                Language.RUSSIAN: "Нужно указать хотя бы один объект",
            },
            "card.config_error": {
                Language.ENGLISH: "Configuration error: {detail}",
                Language.RUSSIAN: "Ошибка конфигурации: {detail}",
            },

            # Center resolution
            "error.center_coordinates_incomplete": {
                Language.ENGLISH: "Both center_latitude and center_longitude must be set",
                Language.RUSSIAN: "Нужно задать и center_latitude, и center_longitude",
            },
            "error.center_sources_conflict": {
                Language.ENGLISH: "Use either center coordinates or location_zone_entity, not both",
                Language.RUSSIAN: "Укажите либо координаты центра, либо location_zone_entity",
            },
            "error.moving_center_conflict": {
                Language.ENGLISH: "Moving center cannot be combined with a fixed center",
                Language.RUSSIAN: "Подвижный центр нельзя совмещать с фиксированным",
            },
            "error.moving_center_entity_missing": {
                Language.ENGLISH: "center_entity is required when center_mode is 'moving'",
                Language.RUSSIAN: "Для center_mode 'moving' нужен center_entity",
            },
            "error.center_unresolved": {
                Language.ENGLISH: "Radar center location is unavailable",
                Language.RUSSIAN: "Положение центра радара недоступно",
            },

            # Tooltip
            "tooltip.distance": {
                Language.ENGLISH: "Distance",
                Language.RUSSIAN: "Расстояние",
            },
            "tooltip.azimuth": {
                Language.ENGLISH: "Azimuth",
                Language.RUSSIAN: "Азимут",
            },

            # Markers
            "marker.add": {
                Language.ENGLISH: "Add marker",
                Language.RUSSIAN: "Добавить метку",
            },
            "marker.edit": {
                Language.ENGLISH: "Edit marker",
                Language.RUSSIAN: "Изменить метку",
            },
            "marker.delete": {
                Language.ENGLISH: "Delete",
                Language.RUSSIAN: "Удалить",
            },
            "marker.clear_all": {
                Language.ENGLISH: "Clear all markers",
                Language.RUSSIAN: "Удалить все метки",
            },
            "marker.name": {
                Language.ENGLISH: "Name",
                Language.RUSSIAN: "Название",
            },
            "marker.none": {
                Language.ENGLISH: "No markers stored",
                Language.RUSSIAN: "Метки не сохранены",
            },
        }

    def get(self, key: str, **kwargs) -> str:
        """
        Get translated string for the current language.

        Returns the key itself when no translation exists.
        """
        if key in self.translations:
            text = self.translations[key].get(self.current_language, key)
            if kwargs:
                return text.format(**kwargs)
            return text
        return key

    def set_language(self, language: Language):
        self.current_language = language

    def get_current_language(self) -> Language:
        return self.current_language
