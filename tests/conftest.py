"""Shared fixtures: a fake genai client so nothing touches the network."""
from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from config import Settings


class FakeModels:
    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def generate_content(self, *, model, contents, config):
        self.calls.append(dict(model=model, contents=contents, config=config))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(text=reply)


class FakeClient:
    def __init__(self, *replies):
        self.models = FakeModels(replies)


DRAFT = {
    "meals": [
        {"name": "Oats & Whey", "description": "Oats, whey, banana",
         "macros": {"protein": 35.4, "carbs": 70.5, "fats": 9.6, "calories": 650.5}},
        {"name": "Chicken Rice", "description": "Chicken breast, white rice",
         "macros": {"protein": 45.2, "carbs": 80.1, "fats": 12.4, "calories": 720.2}},
        {"name": "Salmon Potatoes", "description": "Salmon, boiled potato, olive oil",
         "macros": {"protein": 40.0, "carbs": 60.0, "fats": 25.5, "calories": 700.0}},
        {"name": "Quark Walnuts", "description": "Quark, walnuts, berries",
         "macros": {"protein": 30.0, "carbs": 25.0, "fats": 20.0, "calories": 400.0}},
    ],
    "dailyTotals": {"protein": 150.6, "carbs": 235.6, "fats": 67.5,
                    "calories": 2470.7, "tdee": 2500},
    "recommendations": ["Drink 3 L of water", "Sleep 8 h"],
}


@pytest.fixture
def draft() -> dict:
    return json.loads(json.dumps(DRAFT))


@pytest.fixture
def settings() -> Settings:
    return Settings(gemini_api_key="test-key", gemini_max_retries=2)


@pytest.fixture
def fake_client():
    def _make(*replies):
        return FakeClient(*replies)
    return _make
