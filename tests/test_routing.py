from __future__ import annotations

import unittest
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from finance_bot.main import app


class RoutingTests(unittest.TestCase):
    """Ensure the FastAPI surface responds and delegates to the bot."""

    @classmethod
    def setUpClass(cls) -> None:
        cls._init_bot_patch = patch("finance_bot.main.init_bot", new=AsyncMock())
        cls._shutdown_bot_patch = patch("finance_bot.main.shutdown_bot", new=AsyncMock())
        cls._handle_update_patch = patch("finance_bot.api.telegram.handle_update", new_callable=AsyncMock)
        cls._telegram_settings_patch = patch(
            "finance_bot.api.telegram.get_settings",
            return_value=SimpleNamespace(telegram_webhook_secret="secret123"),
        )

        cls.init_bot_mock = cls._init_bot_patch.start()
        cls.shutdown_bot_mock = cls._shutdown_bot_patch.start()
        cls.handle_update_mock = cls._handle_update_patch.start()
        cls._telegram_settings_patch.start()

        cls._client_ctx = TestClient(app)
        cls.client = cls._client_ctx.__enter__()

    @classmethod
    def tearDownClass(cls) -> None:
        cls._client_ctx.__exit__(None, None, None)
        for patcher in (
            cls._telegram_settings_patch,
            cls._handle_update_patch,
            cls._shutdown_bot_patch,
            cls._init_bot_patch,
        ):
            patcher.stop()

    def setUp(self) -> None:
        self.handle_update_mock.reset_mock(side_effect=True)

    def test_lifespan_starts_bot(self) -> None:
        self.init_bot_mock.assert_awaited_once()

    def test_healthcheck(self) -> None:
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_telegram_webhook_route(self) -> None:
        payload = {"update_id": 1}
        response = self.client.post("/api/telegram/webhook/secret123", json=payload)
        self.assertEqual(response.status_code, 204)
        self.handle_update_mock.assert_awaited_once_with(payload)

    def test_telegram_webhook_bad_secret(self) -> None:
        response = self.client.post("/api/telegram/webhook/wrong", json={"update_id": 1})
        self.assertEqual(response.status_code, 404)
        self.handle_update_mock.assert_not_awaited()

    def test_telegram_webhook_when_bot_not_running(self) -> None:
        self.handle_update_mock.side_effect = RuntimeError("Telegram bot is not initialised.")
        response = self.client.post("/api/telegram/webhook/secret123", json={"update_id": 7})
        self.assertEqual(response.status_code, 503)


class WebhookSecretTests(unittest.TestCase):
    def test_unset_secret_rejects_every_request(self) -> None:
        with patch(
            "finance_bot.api.telegram.get_settings",
            return_value=SimpleNamespace(telegram_webhook_secret=None),
        ), patch("finance_bot.main.init_bot", new=AsyncMock()), patch(
            "finance_bot.main.shutdown_bot", new=AsyncMock()
        ):
            with TestClient(app) as client:
                response = client.post("/api/telegram/webhook/anything", json={"update_id": 1})
        self.assertEqual(response.status_code, 404)


if __name__ == "__main__":
    unittest.main()
