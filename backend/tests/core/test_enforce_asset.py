"""Asset Rules — tests for pure type, size and naming checks.

Tests cover:
    - check_asset_type requires BOTH MIME type and extension to be allowed
    - check_asset_size rejects empty and oversize payloads, accepts the limit exactly
    - generate_asset_name shape with injected clock/rng
    - name_from_ref rejects foreign prefixes and traversal
"""

import pytest

from app.core.enforce_asset import (
    DEFAULT_MAX_BYTES,
    RANDOM_SUFFIX_MAX,
    check_asset_size,
    check_asset_type,
    file_extension,
    generate_asset_name,
    is_generated_name,
    name_from_ref,
    public_ref,
)
from app.core.errors import AssetTooLargeError, InvalidAssetTypeError


# ─── file_extension ──────────────────────────────────────────────

def test_file_extension_lowercases():
    assert file_extension("Portrait.PNG") == "png"


def test_file_extension_ignores_client_directories():
    assert file_extension("C:\\Users\\me\\photo.Jpeg") == "jpeg"
    assert file_extension("../../etc/avatar.gif") == "gif"


def test_file_extension_empty_without_suffix():
    assert file_extension("avatar") == ""


# ─── check_asset_type ────────────────────────────────────────────

@pytest.mark.parametrize("filename,mime,ext", [
    ("a.png", "image/png", "png"),
    ("a.jpg", "image/jpeg", "jpg"),
    ("a.jpeg", "image/jpeg", "jpeg"),
    ("a.GIF", "image/gif", "gif"),
])
def test_check_asset_type_accepts_allowed_images(filename, mime, ext):
    assert check_asset_type(filename, mime) == ext


def test_check_asset_type_rejects_text_file():
    with pytest.raises(InvalidAssetTypeError):
        check_asset_type("notes.txt", "text/plain")


def test_check_asset_type_rejects_spoofed_extension():
    with pytest.raises(InvalidAssetTypeError):
        check_asset_type("payload.exe", "image/png")


def test_check_asset_type_rejects_spoofed_mime():
    with pytest.raises(InvalidAssetTypeError):
        check_asset_type("avatar.png", "application/octet-stream")


def test_check_asset_type_rejects_missing_extension():
    with pytest.raises(InvalidAssetTypeError) as exc:
        check_asset_type("avatar", "image/png")
    assert "no extension" in exc.value.message


def test_check_asset_type_ignores_mime_parameters():
    assert check_asset_type("a.png", "image/png; charset=binary") == "png"


def test_check_asset_type_respects_custom_allow_list():
    assert check_asset_type("a.png", "image/png", ["png"]) == "png"
    with pytest.raises(InvalidAssetTypeError):
        check_asset_type("a.gif", "image/gif", ["png"])


# ─── check_asset_size ────────────────────────────────────────────

def test_check_asset_size_accepts_exact_limit():
    check_asset_size(DEFAULT_MAX_BYTES)


def test_check_asset_size_rejects_over_limit():
    with pytest.raises(AssetTooLargeError) as exc:
        check_asset_size(6 * 1024 * 1024)
    assert exc.value.http_status == 413
    assert exc.value.limit == DEFAULT_MAX_BYTES


def test_check_asset_size_rejects_empty():
    with pytest.raises(InvalidAssetTypeError):
        check_asset_size(0)


# ─── generate_asset_name ─────────────────────────────────────────

def test_generate_asset_name_shape():
    name = generate_asset_name(
        "image", "png", clock=lambda: 1_700_000_000.5, rng=lambda a, b: 42,
    )
    assert name == "image-1700000000500-42.png"


def test_generate_asset_name_random_range():
    seen = []

    def rng(low, high):
        seen.append((low, high))
        return high

    generate_asset_name("image", "gif", rng=rng)
    assert seen == [(0, RANDOM_SUFFIX_MAX)]


def test_generate_asset_name_is_well_formed_and_separator_free():
    name = generate_asset_name("image", "jpg")
    assert is_generated_name(name)
    assert "/" not in name and "\\" not in name


def test_generate_asset_name_rejects_unsafe_label():
    with pytest.raises(ValueError):
        generate_asset_name("../image", "png")


# ─── references ──────────────────────────────────────────────────

def test_public_ref_joins_prefix_and_name():
    assert public_ref("/uploads/", "image-1-2.png") == "/uploads/image-1-2.png"


def test_name_from_ref_round_trips_public_ref():
    ref = public_ref("/uploads", "image-1-2.png")
    assert name_from_ref("/uploads", ref) == "image-1-2.png"


@pytest.mark.parametrize("ref", [
    "/static/image-1-2.png",
    "/uploads/../secrets.png",
    "/uploads/sub/image-1-2.png",
    "/uploads/",
    "",
])
def test_name_from_ref_rejects_foreign_or_traversing_refs(ref):
    assert name_from_ref("/uploads", ref) is None
