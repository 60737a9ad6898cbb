import pytest

from docscanner import DEFAULT_CONFIG, ScanConfig, ScanFailure, ScanResult, ScannerError


def test_defaults():
    assert DEFAULT_CONFIG.blur_kernel == 5
    assert (DEFAULT_CONFIG.canny_low, DEFAULT_CONFIG.canny_high) == (75, 200)
    assert DEFAULT_CONFIG.min_contour_area == 1000
    assert DEFAULT_CONFIG.approx_epsilon == 0.02
    assert DEFAULT_CONFIG.threshold_block_size == 15
    assert DEFAULT_CONFIG.threshold_offset == 10
    assert DEFAULT_CONFIG.jpeg_quality == 95


@pytest.mark.parametrize("changes", [
    {"blur_kernel": 4},
    {"threshold_block_size": 1},
    {"canny_low": 250},
    {"approx_epsilon": 0},
    {"jpeg_quality": 101},
    {"fill_value": -1},
    {"min_contour_area": -5},
])
def test_rejects_invalid_values(changes):
    with pytest.raises(ValueError):
        ScanConfig(**changes)


def test_from_env_overrides():
    config = ScanConfig.from_env({
        "DOCSCANNER_JPEG_QUALITY": "80",
        "DOCSCANNER_MIN_CONTOUR_AREA": "2500.5",
        "UNRELATED": "x",
    })

    assert config.jpeg_quality == 80
    assert config.min_contour_area == 2500.5
    assert config.canny_high == 200


def test_from_env_rejects_garbage():
    with pytest.raises(ValueError, match="DOCSCANNER_CANNY_LOW"):
        ScanConfig.from_env({"DOCSCANNER_CANNY_LOW": "low"})


def test_from_env_reads_process_environment(monkeypatch):
    monkeypatch.setenv("DOCSCANNER_THRESHOLD_OFFSET", "4")

    assert ScanConfig.from_env().threshold_offset == 4.0


class TestScanResult:

    def test_success(self):
        result = ScanResult.success(42)

        assert result.ok and bool(result)
        assert result.unwrap() == 42

    def test_failure(self):
        result = ScanResult.fail(ScanFailure.NOT_FOUND)

        assert not result
        assert result.message == "not_found"
        with pytest.raises(ScannerError, match="not_found"):
            result.unwrap()
