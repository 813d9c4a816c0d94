"""
Tests for InsightComposer: prompt building, ad style classification and
failure handling.
"""

import pytest
from unittest.mock import AsyncMock

from adinsight.analysis.engagement import compute_engagement
from adinsight.analysis.sentiment import SentimentAnalyzer
from adinsight.analysis.sponsorship import SponsorshipDetector
from adinsight.core.config import DetectionRules
from adinsight.core.exceptions import ExternalServiceError
from adinsight.core.models import (
    ANALYSIS_FAILED,
    AdStyle,
    SentimentSummary,
    SponsorshipInfo,
    VideoComment,
    VideoRecord,
)
from adinsight.services.insight_composer import InsightComposer


LEXICON = {"love": 3, "great": 3, "terrible": -3}


def _video(sponsorship=None, **overrides):
    defaults = dict(
        video_id="vid1",
        title="Desk tour",
        description="This video is sponsored by Nord.",
        tags=["desk", "setup"],
        view_count=1000,
        like_count=50,
        comment_count=10,
        engagement_metrics=compute_engagement(1000, 50, 10),
        sponsorship_info=sponsorship or SponsorshipInfo(
            has_sponsorship=True,
            sponsorship_details="This video is sponsored by Nord.",
            ad_indicators=["sponsor"],
        ),
    )
    defaults.update(overrides)
    return VideoRecord(**defaults)


def _comments(*texts):
    return [VideoComment(comment_id=f"c{i}", text=text) for i, text in enumerate(texts)]


@pytest.fixture
def generator():
    return AsyncMock(return_value="  The integration is a short-form mid-roll.  ")


@pytest.fixture
def composer(generator):
    return InsightComposer(generator, SentimentAnalyzer(lexicon=LEXICON))


class TestPrompt:

    def test_prompt_contents(self, composer):
        prompt = composer.build_prompt(_video(), _comments("love it"))

        assert "Title: Desk tour" in prompt
        assert "Tags: desk, setup" in prompt
        assert "Has Sponsorship: true" in prompt
        assert "Sponsorship Details: This video is sponsored by Nord." in prompt
        assert "Engagement Rate: 6.00%" in prompt
        assert "love it" in prompt
        assert "5. Recommendations for Improving Ad Performance" in prompt

    def test_description_truncated(self, composer):
        prompt = composer.build_prompt(_video(description="x" * 1500), [])

        assert "x" * 1000 in prompt
        assert "x" * 1001 not in prompt

    def test_at_most_five_comment_samples(self, composer):
        comments = _comments(*[f"sample-{i}" for i in range(8)])
        prompt = composer.build_prompt(_video(), comments)

        assert "sample-4" in prompt
        assert "sample-5" not in prompt

    def test_unenriched_video_is_enriched_for_the_prompt(self, composer):
        video = _video(engagement_metrics=None)
        video = video.model_copy(update={"sponsorship_info": None})

        prompt = composer.build_prompt(video, [])

        assert "Has Sponsorship: true" in prompt
        assert "Engagement Rate: 6.00%" in prompt

    def test_unenriched_video_uses_injected_detector(self, generator):
        video = _video(description="Brought to you by Acme", engagement_metrics=None)
        video = video.model_copy(update={"sponsorship_info": None})

        default_composer = InsightComposer(generator, SentimentAnalyzer(lexicon=LEXICON))
        configured = InsightComposer(
            generator,
            SentimentAnalyzer(lexicon=LEXICON),
            detector=SponsorshipDetector(DetectionRules(sponsor_indicators=["brought to you by"])),
        )

        assert "Has Sponsorship: false" in default_composer.build_prompt(video, [])
        assert "Has Sponsorship: true" in configured.build_prompt(video, [])


class TestCompose:

    @pytest.mark.asyncio
    async def test_success(self, composer, generator):
        result = await composer.compose(_video(), _comments("love it", "terrible ad"))

        generator.assert_awaited_once()
        assert result.succeeded is True
        assert result.ai_insights == "The integration is a short-form mid-roll."
        assert result.ad_style == AdStyle.SHORT_FORM
        assert result.ad_sentiment.total_comments == 2
        assert result.ad_sentiment.positive_percentage == 50.0
        assert 0.0 <= result.ad_effectiveness <= 100.0
        assert result.last_analyzed.tzinfo is not None

    @pytest.mark.asyncio
    async def test_generator_failure(self, composer, generator):
        generator.side_effect = ExternalServiceError("gemini", "Response blocked: SAFETY")

        result = await composer.compose(_video(), _comments("love it"))

        assert result.succeeded is False
        assert result.ai_insights == ANALYSIS_FAILED
        assert result.ad_style == AdStyle.UNKNOWN
        assert result.ad_effectiveness == 0.0
        assert result.ad_sentiment == SentimentSummary()

    @pytest.mark.asyncio
    async def test_no_comments(self, composer):
        result = await composer.compose(_video(), [])

        assert result.succeeded is True
        assert result.ad_sentiment.total_comments == 0


class TestAdStyle:

    def _info(self, duration=None, sponsored=True):
        return SponsorshipInfo(has_sponsorship=sponsored, ad_duration=duration)

    def test_no_sponsorship_is_unknown(self, composer):
        assert composer.classify_ad_style(self._info(sponsored=False), "long-form") == AdStyle.UNKNOWN

    def test_long_segment(self, composer):
        assert composer.classify_ad_style(self._info(75), "short-form") == AdStyle.LONG_FORM

    def test_segment_at_threshold_is_short(self, composer):
        assert composer.classify_ad_style(self._info(60), "") == AdStyle.SHORT_FORM

    def test_zero_length_segment_is_short(self, composer):
        assert composer.classify_ad_style(self._info(0), "long-form") == AdStyle.SHORT_FORM

    def test_reply_wording_long_checked_first(self, composer):
        reply = "Mostly short-form, with one Long-Form read"
        assert composer.classify_ad_style(self._info(), reply) == AdStyle.LONG_FORM

    def test_reply_wording_short(self, composer):
        assert composer.classify_ad_style(self._info(), "A Short-form spot") == AdStyle.SHORT_FORM

    def test_reply_without_wording(self, composer):
        assert composer.classify_ad_style(self._info(), "Nice placement") == AdStyle.UNKNOWN
