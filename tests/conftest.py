import pathlib
import sys

import pytest
from PIL import Image

PROJECT_ROOT = pathlib.Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from bloodcamp.app import create_app, db
from bloodcamp.shared.certificate_assets import clear_asset_caches

from helpers import ADMIN_PASSWORD, ADMIN_USERNAME, CSRF_TOKEN, prime_csrf


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "slow" in item.keywords or "quarantine" in item.keywords:
            continue
        item.add_marker("full")
        if "no_smoke" in item.keywords:
            continue
        item.add_marker("smoke")


@pytest.fixture
def background_path(tmp_path):
    path = tmp_path / "background.png"
    Image.new("RGBA", (600, 450), (240, 200, 120, 255)).save(path)
    return path


@pytest.fixture
def app(tmp_path, background_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    monkeypatch.setenv("ADMIN_USERNAME", ADMIN_USERNAME)
    monkeypatch.setenv("ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.delenv("ADMIN_PASSWORD_HASH", raising=False)
    monkeypatch.setenv("CERTIFICATE_BACKGROUND", str(background_path))
    monkeypatch.setenv("CERTIFICATE_FONT", str(tmp_path / "no-such-font.ttf"))
    monkeypatch.delenv("CERTIFICATE_LAYOUT", raising=False)
    for key in ("SMTP_HOST", "SMTP_PORT", "SMTP_FROM_DEFAULT"):
        monkeypatch.delenv(key, raising=False)
    clear_asset_caches()
    application = create_app()
    application.config["TESTING"] = True
    with application.app_context():
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return prime_csrf(app.test_client())


@pytest.fixture
def admin_client(client):
    resp = client.post(
        "/admin/login",
        data={
            "username": ADMIN_USERNAME,
            "password": ADMIN_PASSWORD,
            "csrf_token": CSRF_TOKEN,
        },
    )
    assert resp.status_code == 302
    return client
