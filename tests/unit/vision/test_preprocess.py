import numpy as np

from subextract.vision.preprocess import (
    binarize,
    crop_region,
    preprocess_region,
    subtitle_band,
)


def test_subtitle_band_floors_pixel_values() -> None:
    assert subtitle_band(1080, 80, 20) == (864, 216)
    assert subtitle_band(101, 80, 20) == (80, 20)


def test_crop_region_is_full_width_band(caption_frame) -> None:
    band = crop_region(caption_frame, 80, 20)
    assert band.shape == (8, 64, 3)
    assert np.array_equal(band, caption_frame[32:40])


def test_crop_region_pads_below_frame_with_black() -> None:
    frame = np.full((20, 10, 3), 200, dtype=np.uint8)
    band = crop_region(frame, 90, 20)  # rows 18..22 of a 20-row frame
    assert band.shape == (4, 10, 3)
    assert np.all(band[:2] == 200)
    assert np.all(band[2:] == 0)


def test_binarize_thresholds_channel_average() -> None:
    image = np.zeros((1, 4, 3), dtype=np.uint8)
    image[0, 0] = [128, 128, 128]  # exactly at threshold -> white
    image[0, 1] = [127, 128, 128]  # average 127.67 -> black
    image[0, 2] = [255, 0, 130]  # average 128.33 -> white
    image[0, 3] = [10, 10, 10]

    out = binarize(image)

    assert out.shape == image.shape
    assert out[0, :, 0].tolist() == [255, 0, 255, 0]
    # All channels carry the same value
    assert np.array_equal(out[..., 0], out[..., 2])


def test_binarize_grayscale_and_alpha() -> None:
    gray = np.array([[0, 127, 128, 255]], dtype=np.uint8)
    assert binarize(gray).tolist() == [[0, 0, 255, 255]]

    bgra = np.zeros((1, 2, 4), dtype=np.uint8)
    bgra[0, 0] = [200, 200, 200, 17]
    out = binarize(bgra)
    assert out[0, 0].tolist() == [255, 255, 255, 17]
    assert out[0, 1].tolist() == [0, 0, 0, 0]


def test_preprocess_region_disabled_returns_crop(caption_frame) -> None:
    out = preprocess_region(caption_frame, 80, 20, enabled=False)
    assert np.array_equal(out, caption_frame[32:40])


def test_preprocess_region_keeps_light_text_on_dark_background(caption_frame) -> None:
    out = preprocess_region(caption_frame, 80, 20, enabled=True)
    # Caption rows 34..38 of the frame are rows 2..6 of the band
    assert np.all(out[2:6, 8:56] == 255)
    assert np.all(out[:2] == 0)
    assert np.all(out[:, :8] == 0)
