"""Tests for the suggestion pipeline: ordering, short-circuits and failure isolation."""

import asyncio
import logging

import pytest

from outfitai.core.exceptions import (
    NoSuggestionsError,
    SchemaValidationError,
    UpstreamModelError,
)
from outfitai.models.domain.image import Gender, StylingHints
from outfitai.models.domain.outfit import ImageStatus
from outfitai.services.outfit_suggestions import OutfitSuggestionService

from conftest import make_suggestion


@pytest.fixture
def service(fake_ai_service, test_settings) -> OutfitSuggestionService:
    return OutfitSuggestionService(fake_ai_service, test_settings)


async def test_all_renders_succeed(service, image_payload):
    result = await service.generate_suggestions(image_payload)

    assert [o.style_name for o in result.outfit_suggestions] == [
        "Casual", "Formal/Smart", "Trendy/Party"
    ]
    for outfit in result.outfit_suggestions:
        assert outfit.image_status == ImageStatus.COMPLETE
        assert outfit.ai_styled_image.startswith("data:image/png;base64,")


async def test_one_failed_render_is_isolated(service, fake_ai_service, image_payload):
    fake_ai_service.failing_styles = {"Formal/Smart"}

    result = await service.generate_suggestions(image_payload)

    statuses = {o.style_name: o for o in result.outfit_suggestions}
    assert len(result.outfit_suggestions) == 3
    assert statuses["Formal/Smart"].image_status == ImageStatus.ERROR
    assert statuses["Formal/Smart"].ai_styled_image is None
    assert statuses["Casual"].image_status == ImageStatus.COMPLETE
    assert statuses["Trendy/Party"].image_status == ImageStatus.COMPLETE
    assert statuses["Casual"].ai_styled_image is not None


async def test_all_renders_fail_still_succeeds(service, fake_ai_service, image_payload):
    fake_ai_service.failing_styles = {"Casual", "Formal/Smart", "Trendy/Party"}

    result = await service.generate_suggestions(image_payload)

    assert len(result.outfit_suggestions) == 3
    assert all(o.image_status == ImageStatus.ERROR for o in result.outfit_suggestions)
    assert all(o.ai_styled_image is None for o in result.outfit_suggestions)
    # text content is kept for every suggestion
    assert all(o.recommended_items for o in result.outfit_suggestions)


async def test_unexpected_exception_in_render_is_contained(service, fake_ai_service, image_payload, mocker):
    original = fake_ai_service.render_outfit_image

    async def flaky(image, suggestion, hints=None):
        if suggestion.style_name == "Casual":
            raise RuntimeError("connection reset")
        return await original(image, suggestion, hints)

    mocker.patch.object(fake_ai_service, "render_outfit_image", side_effect=flaky)

    result = await service.generate_suggestions(image_payload)

    assert [o.image_status for o in result.outfit_suggestions] == [
        ImageStatus.ERROR, ImageStatus.COMPLETE, ImageStatus.COMPLETE
    ]


async def test_render_timeout_affects_only_that_suggestion(service, fake_ai_service, image_payload):
    fake_ai_service.slow_styles = {"Trendy/Party"}

    result = await service.generate_suggestions(image_payload)

    assert [o.image_status for o in result.outfit_suggestions] == [
        ImageStatus.COMPLETE, ImageStatus.COMPLETE, ImageStatus.ERROR
    ]


async def test_renders_run_concurrently(service, fake_ai_service, image_payload, mocker):
    original = fake_ai_service.render_outfit_image
    started = 0
    all_started = asyncio.Event()

    async def wait_for_siblings(image, suggestion, hints=None):
        nonlocal started
        started += 1
        if started == 3:
            all_started.set()
        # Sequential execution would never see all three renders in flight.
        await all_started.wait()
        return await original(image, suggestion, hints)

    mocker.patch.object(fake_ai_service, "render_outfit_image", side_effect=wait_for_siblings)

    result = await service.generate_suggestions(image_payload)

    assert all(o.image_status == ImageStatus.COMPLETE for o in result.outfit_suggestions)


async def test_analysis_failure_aborts_pipeline(service, fake_ai_service, image_payload):
    fake_ai_service.analyze_error = UpstreamModelError("vision model unreachable")

    with pytest.raises(UpstreamModelError):
        await service.generate_suggestions(image_payload)

    assert fake_ai_service.recommend_calls == 0
    assert fake_ai_service.rendered_styles == []


async def test_recommendation_failure_short_circuits_rendering(service, fake_ai_service, image_payload):
    fake_ai_service.recommend_error = SchemaValidationError("bad shopping link")

    with pytest.raises(NoSuggestionsError) as exc_info:
        await service.generate_suggestions(image_payload)

    assert isinstance(exc_info.value.__cause__, SchemaValidationError)
    assert fake_ai_service.rendered_styles == []


async def test_empty_recommendations_raise(service, fake_ai_service, image_payload):
    fake_ai_service.suggestions = []

    with pytest.raises(NoSuggestionsError):
        await service.generate_suggestions(image_payload)

    assert fake_ai_service.rendered_styles == []


async def test_unexpected_count_is_accepted_by_default(service, fake_ai_service, image_payload):
    fake_ai_service.suggestions = [make_suggestion("Casual"), make_suggestion("Sporty")]

    result = await service.generate_suggestions(image_payload)

    assert len(result.outfit_suggestions) == 2


async def test_unexpected_count_rejected_in_strict_mode(fake_ai_service, test_settings, image_payload):
    strict = test_settings.model_copy(update={"STRICT_SUGGESTION_COUNT": True})
    service = OutfitSuggestionService(fake_ai_service, strict)
    fake_ai_service.suggestions = [make_suggestion("Casual")]

    with pytest.raises(NoSuggestionsError):
        await service.generate_suggestions(image_payload)

    assert fake_ai_service.rendered_styles == []


async def test_hints_are_forwarded(service, fake_ai_service, image_payload):
    hints = StylingHints(gender=Gender.FEMALE)

    await service.generate_suggestions(image_payload, hints)

    assert fake_ai_service.received_hints == [hints]


async def test_unexpected_recommendation_error_becomes_no_suggestions(service, fake_ai_service, image_payload):
    fake_ai_service.recommend_error = RuntimeError("malformed response object")

    with pytest.raises(NoSuggestionsError) as exc_info:
        await service.generate_suggestions(image_payload)

    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert fake_ai_service.rendered_styles == []


async def test_render_failure_reasons_are_logged(service, fake_ai_service, image_payload, caplog):
    fake_ai_service.failing_styles = {"Formal/Smart"}

    with caplog.at_level(logging.INFO, logger="outfitai.services.outfit_suggestions"):
        await service.generate_suggestions(image_payload)

    summary = next(r for r in caplog.records if r.getMessage() == "Outfit suggestions generated")
    assert summary.image_failures == 1
    assert list(summary.failure_reasons) == ["Formal/Smart"]
