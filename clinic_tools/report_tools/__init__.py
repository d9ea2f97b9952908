"""Allure report helpers."""
