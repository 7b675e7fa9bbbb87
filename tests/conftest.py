"""
Pytest configuration and fixtures for Ikusa tests
"""

import pytest
import sys
from pathlib import Path
from unittest.mock import MagicMock

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.auth.config import AuthSettings, get_auth_settings
from app.dependencies import get_db, get_bdo_client
from database.supabase_client import IkusaDB
from scraper.client import BDOClient


SESSION_TOKEN = "test-session-token"
SESSION_COOKIE = "ikusa_session"


@pytest.fixture(scope="function")
def auth_settings():
    """Auth configured with known credentials"""
    return AuthSettings(
        IKUSA_USERNAME="admin",
        IKUSA_PASSWORD="senha-secreta",
        IKUSA_SESSION_TOKEN=SESSION_TOKEN,
        AUTH_ENABLED=True,
        ENVIRONMENT="development",
    )


@pytest.fixture(scope="function")
def mock_db():
    """IkusaDB with every async method mocked"""
    return MagicMock(spec=IkusaDB)


@pytest.fixture(scope="function")
def mock_scraper():
    """BDOClient with every async method mocked"""
    return MagicMock(spec=BDOClient)


@pytest.fixture(scope="function")
def client(auth_settings, mock_db, mock_scraper):
    """TestClient with DB, scraper and auth settings overridden"""
    from fastapi.testclient import TestClient
    from app.server import app

    app.dependency_overrides[get_auth_settings] = lambda: auth_settings
    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_bdo_client] = lambda: mock_scraper

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def logged_client(client):
    """TestClient carrying a valid session cookie"""
    client.cookies.set(SESSION_COOKIE, SESSION_TOKEN)
    return client


@pytest.fixture(scope="function")
def sample_profile_html():
    """Profile page with papd in .desc spans"""
    return """
    <html>
      <body>
        <div class="character_info">
          <span class="name">Aventureiro</span>
          <span class="desc">Nível</span>
          <span class="desc">62</span>
          <span class="desc">287</span>
          <span class="desc">315</span>
        </div>
        <footer><span>2024</span></footer>
      </body>
    </html>
    """


@pytest.fixture(scope="function")
def sample_guild_html():
    """Guild page with member links"""
    return """
    <html>
      <body>
        <ul class="guild_member">
          <li><a href="/pt-BR/Adventure/Profile?profileTarget=AAA">Kaiser</a></li>
          <li><a href="https://www.sa.playblackdesert.com/pt-BR/Adventure/Profile?profileTarget=BBB">Nyx</a></li>
          <li><a href="/pt-BR/Adventure/Profile?profileTarget=CCC">   </a></li>
          <li><a href="/pt-BR/Adventure/Guild">Guilda</a></li>
          <li><a href="/pt-BR/Adventure/Profile?profileTarget=AAA">KAISER</a></li>
        </ul>
      </body>
    </html>
    """


@pytest.fixture(scope="function")
def sample_player_rows():
    """players rows with embedded gearscore_history (Supabase shape)"""
    return [
        {
            "id": 1, "user_id": 101, "family_name": "Kaiser", "character_name": "Kai",
            "main_class": "Guerreiro", "link_gear": None,
            "created_at": "2024-01-01T00:00:00+00:00", "updated_at": "2024-01-01T00:00:00+00:00",
            "gearscore_history": [
                {"ap": 300, "aap": 310, "dp": 400, "gearscore": 710, "recorded_at": "2024-01-01T00:00:00+00:00"},
                {"ap": 320, "aap": 330, "dp": 420, "gearscore": 750, "recorded_at": "2024-03-01T00:00:00+00:00"},
            ],
        },
        {
            "id": 2, "user_id": 102, "family_name": "Nyx", "character_name": "Nyxie",
            "main_class": "Bruxa", "link_gear": "https://garmoth.com/x",
            "created_at": "2024-01-01T00:00:00+00:00", "updated_at": "2024-01-02T00:00:00+00:00",
            "gearscore_history": [
                {"ap": 350, "aap": 360, "dp": 450, "gearscore": 810, "recorded_at": "2024-02-01T00:00:00+00:00"},
            ],
        },
        {
            "id": 3, "user_id": 103, "family_name": "LagSwitch", "character_name": "Lag",
            "main_class": "Valquíria",
            "gearscore_history": [
                {"ap": 380, "aap": 380, "dp": 500, "gearscore": 880, "recorded_at": "2024-02-01T00:00:00+00:00"},
            ],
        },
        {
            "id": 4, "user_id": 104, "family_name": "Sunny", "character_name": "Sun",
            "main_class": "Shai",
            "gearscore_history": [
                {"ap": 280, "aap": 280, "dp": 390, "gearscore": 670, "recorded_at": "2024-02-01T00:00:00+00:00"},
            ],
        },
        {
            "id": 5, "user_id": 105, "family_name": "Novato", "character_name": "Nov",
            "main_class": "Arqueiro",
            "gearscore_history": [],
        },
    ]
