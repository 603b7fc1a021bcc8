"""Конфигурация проекта Card Capture."""
