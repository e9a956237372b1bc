"""Aisle: a chat bot that sorts your grocery list by store section."""
