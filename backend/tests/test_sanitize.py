"""
Cursebreakers Backend - Sanitization Tests
===========================================

What we test:
    ✅ Markup is stripped from free text, plain text is left alone
    ✅ Request schemas clean their fields before the services see them
"""

import pytest
from pydantic import ValidationError as SchemaValidationError

from cursebreakers.sanitize import sanitize_list, sanitize_optional, sanitize_text
from cursebreakers.schemas.blog import ProfileUpdateRequest
from cursebreakers.schemas.post import CommentRequest, PostWriteRequest


class TestSanitizeHelpers:

    def test_plain_text_unchanged(self):
        assert sanitize_text("Just a sentence.") == "Just a sentence."

    def test_tags_stripped(self):
        assert sanitize_text("<b>bold</b> move") == "bold move"

    def test_script_tag_removed(self):
        cleaned = sanitize_text('<script>alert("x")</script>hello')
        assert "<script>" not in cleaned
        assert cleaned.endswith("hello")

    def test_attributes_do_not_survive(self):
        cleaned = sanitize_text('<img src=x onerror="steal()">caption')
        assert "onerror" not in cleaned
        assert "<img" not in cleaned

    def test_whitespace_trimmed(self):
        assert sanitize_text("  padded  ") == "padded"

    def test_optional_none(self):
        assert sanitize_optional(None) is None

    def test_list_drops_empty_entries(self):
        assert sanitize_list(["python", "<i></i>", " fastapi "]) == ["python", "fastapi"]

    def test_list_none(self):
        assert sanitize_list(None) == []


class TestPostWriteRequest:

    def test_fields_cleaned(self):
        body = PostWriteRequest(
            title="<h1>Title</h1>",
            content="<p>Body text</p>",
            hashtags=["<em>news</em>"],
        )
        assert body.title == "Title"
        assert body.content == "Body text"
        assert body.hashtags == ["news"]

    def test_hashtags_from_string(self):
        body = PostWriteRequest(title="t", content="c", hashtags="python, fastapi  #async")
        assert body.hashtags == ["python", "fastapi", "#async"]

    def test_public_defaults_true(self):
        assert PostWriteRequest(title="t", content="c").public is True
        assert PostWriteRequest(title="t", content="c", public=None).public is True

    def test_explicit_private_kept(self):
        assert PostWriteRequest(title="t", content="c", public=False).public is False

    def test_title_that_is_only_markup_rejected(self):
        with pytest.raises(SchemaValidationError):
            PostWriteRequest(title="<br>", content="c")


class TestOtherRequests:

    def test_comment_text_cleaned(self):
        body = CommentRequest(text="<a href='x'>nice</a> post")
        assert body.text == "nice post"
        assert body.username is None

    def test_empty_comment_rejected(self):
        with pytest.raises(SchemaValidationError):
            CommentRequest(text="   ")

    def test_profile_update_accepts_camel_case(self):
        body = ProfileUpdateRequest.model_validate(
            {
                "newTitle": "<b>My Blog</b>",
                "userBefore": "alice",
                "newUsername": "alice-2",
                "category": "tech",
                "links": ["https://example.com/alice", ""],
            }
        )
        assert body.new_title == "My Blog"
        assert body.user_before == "alice"
        assert body.new_username == "alice-2"
        assert body.links == ["https://example.com/alice"]

    def test_profile_update_null_links(self):
        assert ProfileUpdateRequest(links=None).links == []
