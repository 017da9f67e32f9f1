from unittest.mock import MagicMock

import pytest
from bs4 import BeautifulSoup

from models.domain import SweepStatus
from services.brand_classifier import BrandClassifier
from services.credential_store import CredentialStore
from services.errors import StorageError
from services.gemini import GeminiService
from services.sweep_pipeline import ListingSweeper, sweep_html


def _sweeper(store, fake, **kwargs) -> ListingSweeper:
    return ListingSweeper(store, classifier=BrandClassifier(GeminiService(transport=fake.transport())), **kwargs)


def _brands_left(doc: BeautifulSoup) -> list[str]:
    return [span.get_text(strip=True) for span in doc.select('div[role="listitem"] h2 span')]


@pytest.mark.asyncio
async def test_end_to_end_removes_delete_brands(db_session, fake_gemini, page, listing):
    CredentialStore(db_session).set("stored-key")
    fake = fake_gemini.replying('{"Acme":"delete","Globex":"keep"}')
    doc = BeautifulSoup(page(listing("Acme"), listing("Acme"), listing("Globex")), "html.parser")

    result = await _sweeper(CredentialStore(db_session), fake).run(doc)

    assert result.status == SweepStatus.COMPLETED
    assert result.ok
    assert result.brands == ["Acme", "Globex"]
    assert result.decisions == {"Acme": "delete", "Globex": "keep"}
    assert result.removed == ["Acme", "Acme"]
    assert _brands_left(doc) == ["Globex"]
    assert fake.requests[0].url.params["key"] == "stored-key"


@pytest.mark.asyncio
async def test_fenced_response_is_applied(db_session, fake_gemini, page, listing):
    CredentialStore(db_session).set("k")
    fake = fake_gemini.replying('```json\n{"Initech": "delete"}\n```')
    doc = BeautifulSoup(page(listing("Initech"), listing("Hooli")), "html.parser")

    result = await _sweeper(CredentialStore(db_session), fake).run(doc)

    assert result.status == SweepStatus.COMPLETED
    assert _brands_left(doc) == ["Hooli"]


@pytest.mark.asyncio
async def test_prompted_key_is_stored_and_used(db_session, fake_gemini, page, listing):
    fake = fake_gemini.replying('{"Acme": "keep"}')
    prompt = MagicMock(return_value="  typed-key  ")
    store = CredentialStore(db_session)

    result = await _sweeper(store, fake, prompt_for_key=prompt).run(
        BeautifulSoup(page(listing("Acme")), "html.parser")
    )

    assert result.status == SweepStatus.COMPLETED
    prompt.assert_called_once()
    assert store.get() == "typed-key"
    assert fake.requests[0].url.params["key"] == "typed-key"


@pytest.mark.asyncio
async def test_stored_key_skips_prompt(db_session, fake_gemini, page, listing):
    CredentialStore(db_session).set("stored-key")
    prompt = MagicMock(return_value="other")
    fake = fake_gemini.replying("{}")

    await _sweeper(CredentialStore(db_session), fake, prompt_for_key=prompt).run(
        BeautifulSoup(page(listing("Acme")), "html.parser")
    )

    prompt.assert_not_called()


@pytest.mark.parametrize("answer", [None, "", "   "])
@pytest.mark.asyncio
async def test_declined_prompt_aborts_without_side_effects(db_session, fake_gemini, page, listing, answer):
    fake = fake_gemini.replying('{"Acme": "delete"}')
    store = CredentialStore(db_session)
    html = page(listing("Acme"))
    doc = BeautifulSoup(html, "html.parser")

    result = await _sweeper(store, fake, prompt_for_key=lambda: answer).run(doc)

    assert result.status == SweepStatus.NO_CREDENTIAL
    assert not result.ok
    assert fake.requests == []
    assert store.get() is None
    assert _brands_left(doc) == ["Acme"]


@pytest.mark.asyncio
async def test_no_prompt_and_no_key_reports_missing_credential(db_session, fake_gemini, page, listing):
    fake = fake_gemini.replying("{}")

    result = await _sweeper(CredentialStore(db_session), fake).run(
        BeautifulSoup(page(listing("Acme")), "html.parser")
    )

    assert result.status == SweepStatus.NO_CREDENTIAL
    assert fake.requests == []


@pytest.mark.asyncio
async def test_configured_key_is_used_but_not_stored(db_session, fake_gemini, page, listing):
    fake = fake_gemini.replying("{}")
    store = CredentialStore(db_session)

    result = await _sweeper(store, fake, configured_api_key="env-key").run(
        BeautifulSoup(page(listing("Acme")), "html.parser")
    )

    assert result.status == SweepStatus.COMPLETED
    assert fake.requests[0].url.params["key"] == "env-key"
    assert store.get() is None


@pytest.mark.asyncio
async def test_no_brands_means_no_network_call(db_session, fake_gemini, page, listing):
    CredentialStore(db_session).set("k")
    fake = fake_gemini.replying("{}")

    result = await _sweeper(CredentialStore(db_session), fake).run(
        BeautifulSoup(page(listing(None), listing(None, with_title=False)), "html.parser")
    )

    assert result.status == SweepStatus.NOTHING_TO_CLASSIFY
    assert result.ok
    assert fake.requests == []


@pytest.mark.asyncio
async def test_parse_failure_deletes_nothing(db_session, fake_gemini, page, listing):
    CredentialStore(db_session).set("k")
    fake = fake_gemini.replying("not json at all")
    doc = BeautifulSoup(page(listing("Acme"), listing("Globex")), "html.parser")

    result = await _sweeper(CredentialStore(db_session), fake).run(doc)

    assert result.status == SweepStatus.FAILED
    assert "not valid JSON" in result.error
    assert result.brands == ["Acme", "Globex"]
    assert _brands_left(doc) == ["Acme", "Globex"]


@pytest.mark.asyncio
async def test_shape_failure_deletes_nothing(db_session, fake_gemini, page, listing):
    CredentialStore(db_session).set("k")
    fake = fake_gemini.replying_json({"error": {"message": "quota"}}, status_code=429)
    doc = BeautifulSoup(page(listing("Acme")), "html.parser")

    result = await _sweeper(CredentialStore(db_session), fake).run(doc)

    assert result.status == SweepStatus.FAILED
    assert _brands_left(doc) == ["Acme"]


@pytest.mark.asyncio
async def test_storage_failure_is_reported_not_raised(fake_gemini, page, listing):
    store = MagicMock(spec=CredentialStore)
    store.get.side_effect = StorageError("disk I/O error")
    fake = fake_gemini.replying("{}")

    result = await _sweeper(store, fake).run(BeautifulSoup(page(listing("Acme")), "html.parser"))

    assert result.status == SweepStatus.FAILED
    assert "disk I/O error" in result.error
    assert fake.requests == []


@pytest.mark.asyncio
async def test_unexpected_error_is_reported_not_raised(db_session, fake_gemini, page, listing):
    CredentialStore(db_session).set("k")

    def _broken_extractor(document):
        raise RuntimeError("boom")

    result = await _sweeper(CredentialStore(db_session), fake_gemini.replying("{}"), extractor=_broken_extractor).run(
        BeautifulSoup(page(listing("Acme")), "html.parser")
    )

    assert result.status == SweepStatus.FAILED
    assert result.error == "boom"


@pytest.mark.asyncio
async def test_sweep_html_returns_serialized_document(db_session, fake_gemini, page, listing):
    CredentialStore(db_session).set("k")
    fake = fake_gemini.replying('{"Acme": "delete", "Globex": "keep"}')

    html, result = await sweep_html(page(listing("Acme"), listing("Globex")), _sweeper(CredentialStore(db_session), fake))

    assert result.status == SweepStatus.COMPLETED
    assert "Acme" not in html
    assert "Globex" in html
    assert html.startswith("<html>")
