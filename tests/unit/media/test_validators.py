import pytest

from eventcam.core.modules.media.paths import file_extension, original_object_path, thumb_object_path
from eventcam.core.modules.media.validators import normalize_tags, validate_file_size, validate_file_type
from eventcam.errors import ValidationError


class TestValidateFileType:
    @pytest.mark.parametrize(("value", "expected"), [("image/jpeg", "image/jpeg"), (" Video/MP4 ", "video/mp4")])
    def test_allowed(self, value, expected):
        assert validate_file_type(value) == expected

    @pytest.mark.parametrize("value", ["application/pdf", "text/html", "image/", "", "imagejpeg"])
    def test_rejected(self, value):
        with pytest.raises(ValidationError):
            validate_file_type(value)


class TestValidateFileSize:
    def test_bounds(self):
        validate_file_size(1, 10)
        validate_file_size(10, 10)

    @pytest.mark.parametrize("size", [0, -1, 11])
    def test_out_of_bounds(self, size):
        with pytest.raises(ValidationError):
            validate_file_size(size, 10)


class TestNormalizeTags:
    def test_normalized_and_deduplicated(self):
        assert normalize_tags([" Dance ", "dance", "", "Cake"]) == ["dance", "cake"]

    def test_too_many(self):
        with pytest.raises(ValidationError):
            normalize_tags([f"tag{i}" for i in range(11)])

    def test_too_long(self):
        with pytest.raises(ValidationError):
            normalize_tags(["x" * 33])


def test_object_paths():
    assert file_extension("image/jpeg") == "jpg"
    assert file_extension("application/x-unknown-thing") == "bin"
    assert original_object_path("e1", "m1", "image/png") == "events/e1/original/m1.png"  # type: ignore[arg-type]
    assert thumb_object_path("e1", "m1") == "events/e1/thumb/m1.jpg"  # type: ignore[arg-type]
