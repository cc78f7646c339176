import json

import pytest
from mysql.connector import IntegrityError
from pydantic import ValidationError

from brava.app import create_app
from brava.llm.provider import ProviderError
from brava.sensors.mock_data import mock_user
from brava.sensors.types import FamilyContact, User
from brava.store import profile as profile_store
from brava.store import scans as scan_store


class FakeLLM:
    """Scripted stand-in for the Gemini call; raises ProviderError once the script runs out."""

    def __init__(self):
        self.responses = []
        self.calls = []

    def queue(self, *responses):
        for r in responses:
            self.responses.append(r if isinstance(r, (str, Exception)) else json.dumps(r))

    def __call__(self, system_prompt, user_prompt, model=None, json_mode=False):
        self.calls.append({"system": system_prompt, "user": user_prompt, "json_mode": json_mode})
        if not self.responses:
            raise ProviderError("no scripted response")
        r = self.responses.pop(0)
        if isinstance(r, Exception):
            raise r
        return r


class FakeStore:
    """In-memory replacement for the MySQL-backed profile and scan stores."""

    def __init__(self):
        self.users = {}
        self.scans = {}

    def get_user(self, user_id):
        return self.users.get(user_id)

    def save_profile(self, user_id, fields):
        current = self.users.get(user_id)
        if current is None:
            return None
        try:
            user = User.model_validate({**current.model_dump(), **fields})
        except ValidationError as e:
            raise ValueError(str(e))
        self.users[user_id] = user
        return user

    def update_threshold(self, user_id, value):
        threshold = profile_store.validate_threshold(value)
        user = self.users.get(user_id)
        if user is None:
            return None
        self.users[user_id] = user.model_copy(update={"threshold": threshold})
        return self.users[user_id]

    def add_contact(self, user_id, contact):
        data = dict(contact)
        data.setdefault("id", f"contact-{len(self.users[user_id].family_contacts) + 1}")
        try:
            fc = FamilyContact.model_validate(data)
        except ValidationError as e:
            raise ValueError(str(e))
        user = self.users[user_id]
        if any(c.id == fc.id for c in user.family_contacts):
            raise IntegrityError(msg=f"Duplicate entry '{user_id}-{fc.id}' for key 'PRIMARY'", errno=1062)
        self.users[user_id] = user.model_copy(update={"family_contacts": [*user.family_contacts, fc]})
        return fc

    def remove_contact(self, user_id, contact_id):
        user = self.users.get(user_id)
        if user is None:
            return False
        kept = [c for c in user.family_contacts if c.id != contact_id]
        self.users[user_id] = user.model_copy(update={"family_contacts": kept})
        return len(kept) != len(user.family_contacts)

    def complete_onboarding(self, user_id, age, weight):
        age_v, weight_v = profile_store.validate_onboarding(age, weight)
        current = self.users.get(user_id) or mock_user().model_copy(update={"id": user_id, "family_contacts": []})
        self.users[user_id] = current.model_copy(update={"age": age_v, "weight": weight_v})
        return self.users[user_id]

    def add_scan(self, user_id, scan):
        self.scans.setdefault(user_id, []).insert(0, scan)
        return scan

    def list_scans(self, user_id, limit=None):
        items = sorted(self.scans.get(user_id, []), key=lambda s: s.timestamp, reverse=True)
        return items[:limit] if limit else items

    def clear_scans(self, user_id):
        return len(self.scans.pop(user_id, []))


@pytest.fixture(autouse=True)
def fake_llm(monkeypatch):
    llm = FakeLLM()
    monkeypatch.setattr("brava.flows.base.call_llm_text", llm)
    return llm


@pytest.fixture
def store(monkeypatch):
    fake = FakeStore()
    fake.users["demo"] = mock_user()
    for name in ("get_user", "save_profile", "update_threshold", "add_contact", "remove_contact", "complete_onboarding"):
        monkeypatch.setattr(profile_store, name, getattr(fake, name))
    for name in ("add_scan", "list_scans", "clear_scans"):
        monkeypatch.setattr(scan_store, name, getattr(fake, name))
    return fake


@pytest.fixture
def app(store):
    return create_app({"TESTING": True})


@pytest.fixture
def client(app):
    return app.test_client()
