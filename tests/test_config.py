"""Server configuration follows the application settings."""
import runpy
from pathlib import Path

from marketsim.core.config import settings

GUNICORN_CONF = Path(__file__).resolve().parent.parent / "gunicorn.conf.py"


class TestGunicornConfig:
    def test_reads_port_and_log_level_from_settings(self):
        conf = runpy.run_path(str(GUNICORN_CONF))
        assert conf["bind"] == f"0.0.0.0:{settings.PORT}"
        assert conf["loglevel"] == settings.LOG_LEVEL.lower()

    def test_serves_the_simulator_app(self):
        conf = runpy.run_path(str(GUNICORN_CONF))
        assert conf["wsgi_app"] == "marketsim.main:app"
        assert conf["worker_class"] == "uvicorn.workers.UvicornWorker"

    def test_workers_override(self, monkeypatch):
        monkeypatch.setenv("WORKERS", "5")
        conf = runpy.run_path(str(GUNICORN_CONF))
        assert conf["workers"] == 5
