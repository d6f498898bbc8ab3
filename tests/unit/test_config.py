"""Unit tests for ClientConfig."""

from unittest.mock import patch

import pytest
import pytest_check as check
from pydantic import ValidationError

from streamchat.session.config import DEFAULT_GREETING, ClientConfig, get_client_config


class TestClientConfigDefaults:
    def test_defaults_without_environment(self) -> None:
        with patch.dict("os.environ", {}, clear=True):
            config = get_client_config()

        check.equal(config.api_url, "http://localhost:8000/api/chat")
        check.equal(config.typing_interval, 0.02)
        check.equal(config.data_prefix, "data:")
        check.equal(config.done_sentinel, "[DONE]")
        check.equal(config.text_field, "response")
        check.is_none(config.history_max_age)
        check.equal(config.greeting, DEFAULT_GREETING)
        check.is_none(config.system_prompt)

    def test_reads_environment(self) -> None:
        env = {
            "CHAT_API_URL": "https://chat.example.com/api/chat",
            "TYPING_INTERVAL": "0.05",
            "HISTORY_MAX_AGE": "3600",
            "CHAT_GREETING": "Welcome!",
            "CLIENT_SYSTEM_PROMPT": "Stay on topic.",
        }
        with patch.dict("os.environ", env, clear=True):
            config = ClientConfig()

        check.equal(config.api_url, "https://chat.example.com/api/chat")
        check.equal(config.typing_interval, 0.05)
        check.equal(config.history_max_age, 3600.0)
        check.equal(config.greeting, "Welcome!")
        check.equal(config.system_prompt, "Stay on topic.")


    def test_blank_typing_interval_selects_immediate_mode(self) -> None:
        with patch.dict("os.environ", {"TYPING_INTERVAL": ""}, clear=True):
            config = ClientConfig()

        assert config.typing_interval is None


class TestClientConfigValidation:
    def test_rejects_non_http_url(self) -> None:
        with pytest.raises(ValidationError, match="http"):
            ClientConfig(api_url="ftp://example.com")

    def test_rejects_negative_interval(self) -> None:
        with pytest.raises(ValidationError):
            ClientConfig(typing_interval=-1)

    def test_none_interval_selects_immediate_mode(self) -> None:
        assert ClientConfig(typing_interval=None).typing_interval is None

    def test_rejects_non_positive_max_age(self) -> None:
        with pytest.raises(ValidationError):
            ClientConfig(history_max_age=0)

    def test_blank_greeting_is_unset(self) -> None:
        assert ClientConfig(greeting="   ").greeting is None

    def test_rejects_unknown_encoding(self) -> None:
        with pytest.raises(ValidationError, match="Unknown text encoding"):
            ClientConfig(encoding="utf-99")

    def test_encoding_stored_under_canonical_name(self) -> None:
        assert ClientConfig(encoding="UTF8").encoding == "utf-8"
