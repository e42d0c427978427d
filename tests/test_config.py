from multitool_api.config import Settings


def test_defaults(monkeypatch):
    for name in [
        "ENVIRONMENT", "PORT", "RAILWAY_PUBLIC_DOMAIN", "RENDER_EXTERNAL_URL",
        "FRONTEND_URL", "TWITTER_DOWNLOADS_ENABLED", "MAX_FORMAT_RESULTS",
    ]:
        monkeypatch.delenv(name, raising=False)

    s = Settings()
    assert s.ENVIRONMENT == "development"
    assert s.PORT == 3000
    assert s.BASE_URL == "http://localhost:3000"
    assert s.TWITTER_DOWNLOADS_ENABLED is False
    assert s.MAX_FORMAT_RESULTS == 10
    assert s.CORS_ORIGINS == ["http://localhost:5173", "http://localhost:3000"]


def test_base_url_prefers_railway(monkeypatch):
    monkeypatch.setenv("RAILWAY_PUBLIC_DOMAIN", "multitool.up.railway.app")
    monkeypatch.setenv("RENDER_EXTERNAL_URL", "https://multitool.onrender.com")
    assert Settings().BASE_URL == "https://multitool.up.railway.app"


def test_base_url_render(monkeypatch):
    monkeypatch.delenv("RAILWAY_PUBLIC_DOMAIN", raising=False)
    monkeypatch.setenv("RENDER_EXTERNAL_URL", "https://multitool.onrender.com/")
    assert Settings().BASE_URL == "https://multitool.onrender.com"


def test_base_url_uses_port(monkeypatch):
    monkeypatch.delenv("RAILWAY_PUBLIC_DOMAIN", raising=False)
    monkeypatch.delenv("RENDER_EXTERNAL_URL", raising=False)
    monkeypatch.setenv("PORT", "8080")
    assert Settings().BASE_URL == "http://localhost:8080"


def test_frontend_url_added_to_cors(monkeypatch):
    monkeypatch.setenv("FRONTEND_URL", "https://tools.example.com")
    assert "https://tools.example.com" in Settings().CORS_ORIGINS


def test_invalid_values_fall_back(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "qa")
    monkeypatch.setenv("PORT", "not-a-port")
    monkeypatch.setenv("MAX_FORMAT_RESULTS", "0")
    s = Settings()
    assert s.ENVIRONMENT == "development"
    assert s.PORT == 3000
    assert s.MAX_FORMAT_RESULTS == 1


def test_twitter_flag(monkeypatch):
    monkeypatch.setenv("TWITTER_DOWNLOADS_ENABLED", "True")
    assert Settings().TWITTER_DOWNLOADS_ENABLED is True
