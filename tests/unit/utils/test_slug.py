"""Tests for slug and folder-name helpers."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from notionsync.utils.slug import sanitize_folder_name, slugify


class TestSlugify:

    @pytest.mark.parametrize(
        ("title", "slug"),
        [
            ("Hello World", "hello-world"),
            ("  Spaces   everywhere ", "spaces-everywhere"),
            ("Java: Basics (part 1)!", "java-basics-part-1"),
            ("snake_case_title", "snake-case-title"),
            ("already-a-slug", "already-a-slug"),
            ("a -- b", "a-b"),
            ("자바 기초", "자바-기초"),
            ("", ""),
        ],
    )
    def test_examples(self, title, slug):
        assert slugify(title) == slug

    @given(st.text(max_size=60))
    def test_idempotent(self, title):
        once = slugify(title)
        assert slugify(once) == once


class TestSanitizeFolderName:

    @pytest.mark.parametrize(
        ("name", "folder"),
        [
            ("hello-world", "hello-world"),
            ("my post: v2!", "my-post-v2"),
            ("../../etc", "etc"),
            ("a/b\\c", "a-b-c"),
            ("under_score", "under_score"),
        ],
    )
    def test_examples(self, name, folder):
        assert sanitize_folder_name(name) == folder

    def test_empty_uses_fallback(self):
        assert sanitize_folder_name("???", fallback="page-1") == "page-1"

    def test_fallback_is_sanitized(self):
        assert sanitize_folder_name("", fallback="abc/def") == "abc-def"

    def test_last_resort(self):
        assert sanitize_folder_name("???", fallback="!!!") == "untitled"
        assert sanitize_folder_name("") == "untitled"

    @given(st.text(max_size=60))
    def test_always_safe(self, name):
        folder = sanitize_folder_name(name)
        assert folder
        assert folder not in (".", "..")
        assert all(c.isascii() and (c.isalnum() or c in "-_") for c in folder)
