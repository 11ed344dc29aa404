import pytest

from acadmix.config import DEFAULT_CORS_ALLOWED_ORIGINS, load_config, parse_cors_allowed_origins


@pytest.fixture(autouse=True)
def dev_environment(monkeypatch):
    for name in ('RENDER', 'SENTRY_ENVIRONMENT', 'ENV', 'FLASK_SECRET_KEY', 'CLOUDINARY_CLOUD_NAME'):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("FLASK_ENV", "development")


def test_load_config_requires_secret_key_in_non_dev(monkeypatch):
    monkeypatch.setenv("RENDER", "true")
    monkeypatch.delenv("FLASK_ENV", raising=False)

    with pytest.raises(RuntimeError):
        load_config()


def test_load_config_allows_missing_secret_in_dev():
    cfg = load_config()
    assert cfg.flask_secret_key == ""


def test_load_config_reads_storage_and_proxy_settings(monkeypatch):
    monkeypatch.setenv("CLOUDINARY_CLOUD_NAME", "acadmix")
    monkeypatch.setenv("PDF_PROXY_READ_TIMEOUT", "45")
    monkeypatch.setenv("PDF_PROXY_CONNECT_TIMEOUT", "2.5")
    monkeypatch.setenv("PDF_PROXY_USER_AGENT", "Acadmix-Test")

    cfg = load_config()

    assert cfg.cloud_name == "acadmix"
    assert cfg.storage_domain_marker == "cloudinary.com"
    assert cfg.pdf_proxy_timeout == (2.5, 45.0)
    assert cfg.pdf_proxy_user_agent == "Acadmix-Test"


def test_invalid_numbers_fall_back_and_clamp(monkeypatch):
    monkeypatch.setenv("PDF_PROXY_READ_TIMEOUT", "not-a-number")
    monkeypatch.setenv("PDF_PROXY_CHUNK_SIZE", "1")
    monkeypatch.setenv("PDF_PROXY_RATE_LIMIT_MAX_REQUESTS", "999999")
    monkeypatch.setenv("SENTRY_TRACES_SAMPLE_RATE", "3")

    cfg = load_config()

    assert cfg.pdf_proxy_read_timeout == 30.0
    assert cfg.pdf_proxy_chunk_size == 1024
    assert cfg.pdf_proxy_rate_limit_max_requests == 10000
    assert cfg.sentry_traces_sample_rate == 1.0


def test_cors_origins_parse_and_default():
    assert parse_cors_allowed_origins("https://Acadmix.example, ,http://localhost:3000") == frozenset({
        "https://acadmix.example",
        "http://localhost:3000",
    })
    assert parse_cors_allowed_origins("") == DEFAULT_CORS_ALLOWED_ORIGINS
