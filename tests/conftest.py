"""
Pytest configuration and shared fixtures.
"""

import os

# Keep loggers configured from settings from writing log files during tests.
os.environ["FORMMATCH_LOG_TO_FILE"] = "0"

import json
from pathlib import Path
from typing import Dict, Any

import pytest

from formmatch.database import init_database, get_session
from formmatch.env import reset_settings
from pipelines.matching.descriptors import FieldDescriptor, FormDescriptor
from storage.repositories.forms import FormRepository


@pytest.fixture(autouse=True)
def fresh_settings():
    """Re-read settings from the environment for every test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def first_name_field() -> FieldDescriptor:
    return FieldDescriptor(id="firstName", type="text", label="First Name", name="firstName", value="John")


@pytest.fixture
def last_name_field() -> FieldDescriptor:
    return FieldDescriptor(id="lastName", type="text", label="Last Name", name="lastName", value="Jane")


@pytest.fixture
def email_field() -> FieldDescriptor:
    return FieldDescriptor(type="email", label="Email", name="email", value="a@b.com")


@pytest.fixture
def age_field() -> FieldDescriptor:
    return FieldDescriptor(type="number", label="Age", name="age", value="25")


@pytest.fixture
def signup_form() -> FormDescriptor:
    """A filled sign-up form as it would be learned."""
    return FormDescriptor.of(
        "signup",
        [
            FieldDescriptor(id="full_name", type="text", label="Full Name", name="full_name", value="Ada Lovelace"),
            FieldDescriptor(id="email", type="email", label="Email Address", name="email", value="ada@example.com"),
            FieldDescriptor(id="phone", type="tel", label="Phone", name="phone", value="555-0100"),
        ],
    )


@pytest.fixture
def register_form() -> FormDescriptor:
    """An empty registration form on another site asking for a subset."""
    return FormDescriptor.of(
        "register",
        [
            FieldDescriptor(id="name", type="text", label="Your Name", name="name"),
            FieldDescriptor(id="mail", type="email", label="E-mail", name="mail"),
        ],
    )


@pytest.fixture
def sample_form_html() -> str:
    """Page with one filled contact form and a search box outside any form."""
    return """
    <html>
    <body>
        <input type="text" name="q" placeholder="Search">
        <form id="contact" action="/contact/send">
            <label for="first_name">First Name</label>
            <input type="text" id="first_name" name="first_name" value="Ada">
            <label>Email <input type="email" name="email" value="ada@example.com"></label>
            <span>Phone</span>
            <input type="tel" name="phone" class="input wide">
            <input type="password" name="password" value="secret">
            <select name="country">
                <option value="uk">United Kingdom</option>
                <option value="fr" selected>France</option>
            </select>
            <input type="checkbox" name="newsletter" checked>
            <textarea name="message">Hello there</textarea>
            <input type="hidden" name="csrf" value="token">
            <input type="submit" value="Send">
        </form>
    </body>
    </html>
    """


@pytest.fixture
def db_path(tmp_path) -> Path:
    path = tmp_path / "formmatch.db"
    init_database(path)
    return path


@pytest.fixture
def repo(db_path):
    """FormRepository over a temporary database."""
    session = get_session(db_path)
    yield FormRepository(session)
    session.close()


@pytest.fixture
def export_document() -> Dict[str, Any]:
    """Export document with one valid and one invalid record."""
    return {
        "formData": {
            "shop.example.com": {
                "checkout": [
                    {"id": "email", "type": "email", "label": "Email", "name": "email",
                     "placeholder": "", "class": "", "value": "ada@example.com"},
                    {"type": "text", "value": "orphan"},
                ]
            }
        },
        "statistics": {"formsDetected": 3, "formsFilled": 1, "fieldsLearned": 7},
        "exportDate": "2026-01-01T00:00:00",
    }


@pytest.fixture
def export_file(tmp_path, export_document) -> Path:
    path = tmp_path / "export.json"
    path.write_text(json.dumps(export_document, indent=2))
    return path
