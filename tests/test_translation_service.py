from unittest.mock import Mock

import pytest
import requests

from tripquest.services.translation_service import TRANSLATE_API_URL, TranslationService


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


def _ok(translations):
    response = Mock()
    response.json.return_value = {"data": {"translations": [{"translatedText": t} for t in translations]}}
    return response


async def test_translates_and_unescapes(session):
    session.post.return_value = _ok(["El viaje de un Explorador a Lisboa", "Caf&eacute; &amp; pasteles"])
    service = TranslationService(api_key="tr-key", session=session)

    result = await service.translate(["A trip to Lisbon", "Coffee & cakes"], "es")

    assert result == ["El viaje de un Explorador a Lisboa", "Café & pasteles"]
    assert session.post.call_args.args == (TRANSLATE_API_URL,)
    assert session.post.call_args.kwargs["params"] == {"key": "tr-key"}
    assert session.post.call_args.kwargs["json"] == {
        "q": ["A trip to Lisbon", "Coffee & cakes"], "target": "es", "format": "text"
    }


@pytest.mark.parametrize("texts, language", [([], "es"), (["Hello"], "en"), (["Hello"], "")])
async def test_nothing_to_translate_skips_the_request(session, texts, language):
    service = TranslationService(api_key="tr-key", session=session)
    assert await service.translate(texts, language) == texts
    session.post.assert_not_called()


async def test_missing_key_returns_input(session):
    service = TranslationService(api_key="", session=session)
    assert await service.translate(["Hello"], "fr") == ["Hello"]
    session.post.assert_not_called()


async def test_failures_return_input(session):
    session.post.side_effect = requests.Timeout("slow")
    service = TranslationService(api_key="tr-key", session=session)
    assert await service.translate(["Hello"], "fr") == ["Hello"]


async def test_unexpected_payload_returns_input(session):
    response = Mock()
    response.json.return_value = {"error": {"code": 400}}
    session.post.return_value = response
    service = TranslationService(api_key="tr-key", session=session)

    assert await service.translate(["Hello"], "fr") == ["Hello"]


async def test_count_mismatch_returns_input(session):
    session.post.return_value = _ok(["Bonjour"])
    service = TranslationService(api_key="tr-key", session=session)

    assert await service.translate(["Hello", "Goodbye"], "fr") == ["Hello", "Goodbye"]


@pytest.mark.parametrize("payload", [
    {"data": None},
    {"data": {"translations": None}},
    {"data": {"translations": ["Bonjour"]}},
    {"data": {"translations": [{"translatedText": None}]}},
    {"data": {"translations": [{"translatedText": 42}]}},
])
async def test_malformed_success_payload_returns_input(session, payload):
    response = Mock()
    response.json.return_value = payload
    session.post.return_value = response
    service = TranslationService(api_key="tr-key", session=session)

    assert await service.translate(["Hello"], "fr") == ["Hello"]
