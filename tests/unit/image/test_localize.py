"""Tests for image localization into the assets folder."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import httpx

from notionsync.image.download import AssetDownloader
from notionsync.image.localize import AssetLocalizer, rewrite_urls
from notionsync.models import LocalAsset


def _localizer(config, image_server, **changes) -> AssetLocalizer:
    config = dataclasses.replace(config, **changes)
    client = httpx.Client(transport=httpx.MockTransport(image_server))
    return AssetLocalizer(config, downloader=AssetDownloader(config, client=client))


class TestLocalize:

    def test_single_image(self, config, localizer, make_document, upload_url):
        url = upload_url("img.png")
        result = localizer.localize(f"![a]({url})", make_document())

        assert result.text == "![a](/assets/images/hello-world/img.png)"
        asset = result.assets[url]
        assert asset.folder == "hello-world"
        assert asset.filename == "img.png"
        assert asset.path == Path(config.assets_root) / "hello-world" / "img.png"
        assert asset.path.read_bytes() == b"bytes of /ws-1234/a1b2c3/img.png"
        assert result.warnings == []

    def test_same_basename_gets_suffix(self, localizer, make_document, upload_url):
        first = upload_url("img.png", folder="aaa")
        second = upload_url("img.png", folder="bbb")
        result = localizer.localize(f"![1]({first})\n![2]({second})", make_document())

        assert result.text == (
            "![1](/assets/images/hello-world/img.png)\n"
            "![2](/assets/images/hello-world/img-1.png)"
        )
        assert result.assets[first].path.read_bytes() == b"bytes of /ws-1234/aaa/img.png"
        assert result.assets[second].path.read_bytes() == b"bytes of /ws-1234/bbb/img.png"

    def test_encoded_basename_rewritten_as_valid_link(
        self, config, localizer, make_document, upload_url
    ):
        url = upload_url("Screenshot%202024.png")
        result = localizer.localize(f"![a]({url})", make_document())

        assert result.text == "![a](/assets/images/hello-world/Screenshot%202024.png)"
        asset = result.assets[url]
        assert asset.filename == "Screenshot 2024.png"
        assert asset.path == Path(config.assets_root) / "hello-world" / "Screenshot 2024.png"
        assert asset.path.is_file()

    def test_repeated_url_downloaded_once(
        self, localizer, image_server, make_document, upload_url
    ):
        url = upload_url("img.png")
        result = localizer.localize(f"![a]({url})\ntext\n![b]({url})", make_document())

        assert len(image_server.requests) == 1
        assert result.text.count("/assets/images/hello-world/img.png") == 2
        assert url not in result.text
        assert len(result.assets) == 1

    def test_existing_file_not_overwritten(self, config, localizer, make_document, upload_url):
        folder = Path(config.assets_root) / "hello-world"
        folder.mkdir(parents=True)
        (folder / "img.png").write_bytes(b"previous run")

        result = localizer.localize(f"![a]({upload_url('img.png')})", make_document())

        assert result.text == "![a](/assets/images/hello-world/img-1.png)"
        assert (folder / "img.png").read_bytes() == b"previous run"

    def test_failed_download_keeps_remote_url(
        self, localizer, image_server, make_document, upload_url
    ):
        good = upload_url("good.png")
        bad = upload_url("bad.png")
        image_server.fail.add("bad.png")
        result = localizer.localize(f"![g]({good})\n![b]({bad})", make_document())

        assert result.text == f"![g](/assets/images/hello-world/good.png)\n![b]({bad})"
        assert list(result.assets) == [good]
        assert len(result.warnings) == 1
        warning = result.warnings[0]
        assert warning.code == "ASSET_NOT_LOCALIZED"
        assert warning.context == {"url": bad, "error_code": "ASSET_DOWNLOAD_ERROR"}

    def test_write_failure_keeps_remote_url(self, config, localizer, make_document, upload_url):
        blocker = Path(config.assets_root) / "hello-world"
        blocker.parent.mkdir(parents=True)
        blocker.write_text("not a directory")
        url = upload_url("img.png")

        result = localizer.localize(f"![a]({url})", make_document())

        assert result.text == f"![a]({url})"
        assert [w.context["error_code"] for w in result.warnings] == ["ASSET_WRITE_ERROR"]

    def test_external_images_ignored(self, localizer, image_server, make_document):
        text = "![x](https://example.com/x.png)"
        result = localizer.localize(text, make_document())
        assert result.text == text
        assert image_server.requests == []

    def test_extra_texts_share_mapping(self, localizer, image_server, make_document, upload_url):
        url = upload_url("img.png")
        other = upload_url("other.png")
        result = localizer.localize(
            f"![a]({url})",
            make_document(),
            extra_texts=[f"<details>![b]({url}) ![c]({other})</details>"],
        )
        assert result.extra_texts == [
            "<details>![b](/assets/images/hello-world/img.png) "
            "![c](/assets/images/hello-world/other.png)</details>"
        ]
        assert len(image_server.requests) == 2

    def test_folder_falls_back_to_document_id(self, localizer, make_document, upload_url):
        result = localizer.localize(
            f"![a]({upload_url('img.png')})",
            make_document(slug="???", id="page-9"),
        )
        assert result.text == "![a](/assets/images/page-9/img.png)"

    def test_unsafe_slug_sanitized(self, localizer, make_document, upload_url):
        result = localizer.localize(
            f"![a]({upload_url('img.png')})",
            make_document(slug="../my post"),
        )
        assert result.text == "![a](/assets/images/my-post/img.png)"

    def test_custom_url_prefix(self, config, image_server, make_document, upload_url):
        localizer = _localizer(config, image_server, assets_url_prefix="static/img/")
        result = localizer.localize(f"![a]({upload_url('img.png')})", make_document())
        assert result.text == "![a](/static/img/hello-world/img.png)"


class TestConcurrentDownloads:

    def test_same_result_as_sequential(self, config, image_server, make_document, upload_url):
        urls = [upload_url("img.png", folder=f"f{i}") for i in range(6)]
        text = "\n".join(f"![{i}]({u})" for i, u in enumerate(urls))

        localizer = _localizer(config, image_server, max_concurrent_downloads=4)
        result = localizer.localize(text, make_document())

        names = [result.assets[u].filename for u in urls]
        assert names == ["img.png"] + [f"img-{i}.png" for i in range(1, 6)]
        for i, url in enumerate(urls):
            assert result.assets[url].path.read_bytes() == f"bytes of /ws-1234/f{i}/img.png".encode()


class TestMetrics:

    def test_counters(self, config, image_server, metrics, make_document, upload_url):
        image_server.fail.add("bad.png")
        localizer = _localizer(config, image_server, metrics=metrics)
        localizer.localize(
            f"![a]({upload_url('a.png')}) ![b]({upload_url('bad.png')})",
            make_document(),
        )
        assert metrics.names().count("notionsync.assets_downloaded_total") == 1
        assert metrics.names().count("notionsync.asset_failures_total") == 1


class TestRewriteUrls:

    def test_longest_url_first(self, tmp_path):
        short = "https://h.test/img"
        long = "https://h.test/img.png"
        assets = {
            short: LocalAsset("p", "a", tmp_path / "a"),
            long: LocalAsset("p", "b.png", tmp_path / "b.png"),
        }
        text = f"![x]({short}) ![y]({long})"
        assert rewrite_urls(text, assets) == (
            "![x](/assets/images/p/a) ![y](/assets/images/p/b.png)"
        )


class TestLocalAssetUrlPath:

    def test_plain_name(self, tmp_path):
        asset = LocalAsset("post", "img-1.png", tmp_path / "img-1.png")
        assert asset.url_path == "/assets/images/post/img-1.png"

    def test_space_percent_encoded(self, tmp_path):
        asset = LocalAsset("post", "Untitled 1.png", tmp_path / "Untitled 1.png")
        assert asset.url_path == "/assets/images/post/Untitled%201.png"

    def test_root_prefix(self, tmp_path):
        asset = LocalAsset("post", "a b.png", tmp_path / "a b.png", url_prefix="/")
        assert asset.url_path == "/post/a%20b.png"
