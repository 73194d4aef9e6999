from unittest import mock

import requests

from rentcar.services.chatbot_service import FALLBACK_REPLY, ChatbotService, chatbot_service


def completion(content):
    mock_resp = mock.Mock()
    mock_resp.raise_for_status = mock.Mock()
    mock_resp.json.return_value = {"choices": [{"message": {"role": "assistant", "content": content}}]}
    return mock_resp


@mock.patch('rentcar.services.chatbot_service.requests.post')
def test_generate_reply_returns_first_choice(mock_post):
    mock_post.return_value = completion("  Mobil tersedia besok.  ")

    bot = ChatbotService("sk-test", model="gpt-3.5-turbo", system_prompt="Kamu asisten rental.")
    assert bot.generate_reply("Ada mobil besok?") == "Mobil tersedia besok."

    kwargs = mock_post.call_args[1]
    assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
    assert kwargs["json"]["model"] == "gpt-3.5-turbo"
    assert kwargs["json"]["messages"] == [
        {"role": "system", "content": "Kamu asisten rental."},
        {"role": "user", "content": "Ada mobil besok?"},
    ]


@mock.patch('rentcar.services.chatbot_service.requests.post')
def test_generate_reply_falls_back_on_error(mock_post):
    mock_post.side_effect = requests.Timeout("timed out")
    assert ChatbotService("sk-test").generate_reply("halo") == FALLBACK_REPLY


@mock.patch('rentcar.services.chatbot_service.requests.post')
def test_generate_reply_falls_back_on_empty_choices(mock_post):
    mock_resp = mock.Mock()
    mock_resp.raise_for_status = mock.Mock()
    mock_resp.json.return_value = {"choices": []}
    mock_post.return_value = mock_resp

    assert ChatbotService("sk-test").generate_reply("halo") == FALLBACK_REPLY


@mock.patch('rentcar.services.chatbot_service.requests.post')
def test_generate_reply_falls_back_on_blank_content(mock_post):
    mock_post.return_value = completion("   ")
    assert ChatbotService("sk-test").generate_reply("halo") == FALLBACK_REPLY


@mock.patch('rentcar.services.chatbot_service.requests.post')
def test_chatbot_service_helper(mock_post):
    mock_post.return_value = completion("Halo!")
    assert chatbot_service("hai") == "Halo!"
