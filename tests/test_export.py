"""Tests for the save/export flow: data URI decoding, file naming and the share/download fallback order."""

import pytest

from config import DRIVE_FOLDER_URL, SAVE_NOTICE_SECONDS
from conftest import PNG_BYTES, PNG_DATA_URI
from export import ExportMethod, decode_data_uri, export_filename, save_image


class FakeShareTarget:
    def __init__(self, can_share=True):
        self.can_share = can_share
        self.shared = []

    def can_share_files(self):
        return self.can_share

    def share(self, data, filename, title):
        self.shared.append((data, filename, title))


class TestDecodeDataUri:
    """Test cases for reading bytes out of a data URI."""

    def test_decodes_png(self):
        assert decode_data_uri(PNG_DATA_URI) == PNG_BYTES

    @pytest.mark.parametrize("uri", ["", "https://example.com/a.png", "data:image/png,raw", "data:image/png;base64,%%%"])
    def test_rejects_invalid_uris(self, uri):
        with pytest.raises(ValueError):
            decode_data_uri(uri)


class TestExportFilename:
    """Test cases for download file names."""

    def test_uses_recipe_title(self):
        assert export_filename("김치찌개") == "김치찌개.png"

    @pytest.mark.parametrize("title", [None, "", "   "])
    def test_default_name(self, title):
        assert export_filename(title) == "ai-recipe.png"

    def test_replaces_path_separators(self):
        assert export_filename("Salt/Pepper: Wings") == "Salt_Pepper_ Wings.png"

    def test_long_korean_title_fits_filesystem_limit(self):
        """Test that a long multibyte title is trimmed below the 255-byte name limit."""
        title = "매콤달콤한 돼지고기 김치찌개와 바삭한 파전 " * 6
        assert len(title.encode("utf-8")) > 255

        filename = export_filename(title)

        assert filename.endswith(".png")
        assert len(filename.encode("utf-8")) <= 255
        assert title.startswith(filename[:-len(".png")])


class TestSaveLongTitle:
    """Test cases for saving under a title longer than the filesystem allows."""

    def test_long_korean_title_still_downloads(self, tmp_path):
        title = "매콤달콤한 돼지고기 김치찌개와 바삭한 파전 완벽 가이드 " * 5

        result = save_image(PNG_DATA_URI, title, tmp_path)

        assert result.method is ExportMethod.DOWNLOAD
        assert result.path.read_bytes() == PNG_BYTES


class TestSaveImage:
    """Test cases for the capability-checked fallback order."""

    def test_share_preferred_when_available(self, tmp_path):
        target = FakeShareTarget(can_share=True)

        result = save_image(PNG_DATA_URI, "Kimchi Stew", tmp_path, target)

        assert result.method is ExportMethod.SHARE
        assert result.path is None
        assert target.shared == [(PNG_BYTES, "Kimchi Stew.png", "Kimchi Stew")]
        assert list(tmp_path.iterdir()) == []

    def test_download_when_share_cannot_take_files(self, tmp_path):
        target = FakeShareTarget(can_share=False)

        result = save_image(PNG_DATA_URI, "Kimchi Stew", tmp_path, target)

        assert result.method is ExportMethod.DOWNLOAD
        assert target.shared == []
        assert result.path.read_bytes() == PNG_BYTES

    def test_download_without_share_target(self, tmp_path):
        result = save_image(PNG_DATA_URI, None, tmp_path / "nested")

        assert result.method is ExportMethod.DOWNLOAD
        assert result.path == tmp_path / "nested" / "ai-recipe.png"
        assert result.path.exists()

    def test_result_carries_folder_link_and_notice(self, tmp_path):
        result = save_image(PNG_DATA_URI, "Kimchi Stew", tmp_path)

        assert result.folder_url == DRIVE_FOLDER_URL
        assert result.notice
        assert result.notice_seconds == SAVE_NOTICE_SECONDS == 8

    def test_invalid_image_propagates(self, tmp_path):
        with pytest.raises(ValueError):
            save_image("not-an-image", "Kimchi Stew", tmp_path)
